"""
Baxoo workspace installer.

This package clones the Baxoo application, installs the dependencies of its
sub-projects, writes the default configuration and records completion so
the workspace is provisioned exactly once.
"""
