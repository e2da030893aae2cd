# installer/errors.py
# -*- coding: utf-8 -*-
"""
Error taxonomy for workspace provisioning.

Every anticipated failure is a ProvisioningError subclass carrying an
ErrorKind. Anything else reaching the step executor or the CLI is reported
as ErrorKind.UNEXPECTED.
"""

from enum import Enum


class ErrorKind(str, Enum):
    ALREADY_INSTALLED = "already_installed"
    DIRTY_TARGET = "dirty_target"
    MISSING_TOOL = "missing_tool"
    CLONE_PERMISSION_DENIED = "clone_permission_denied"
    CLONE_FAILED = "clone_failed"
    DEPENDENCY_INSTALL_FAILED = "dependency_install_failed"
    CONFIG_TEMPLATE_MISSING = "config_template_missing"
    STATIC_ASSETS_PATH_MISSING = "static_assets_path_missing"
    UNEXPECTED = "unexpected"


class ProvisioningError(Exception):
    """Base class for anticipated provisioning failures."""

    kind: ErrorKind = ErrorKind.UNEXPECTED
    # Key into AppSettings.symbols used when the error is reported.
    symbol: str = "error"


class AlreadyInstalledError(ProvisioningError):
    kind = ErrorKind.ALREADY_INSTALLED
    symbol = "warning"


class DirtyTargetError(ProvisioningError):
    kind = ErrorKind.DIRTY_TARGET


class MissingToolError(ProvisioningError):
    kind = ErrorKind.MISSING_TOOL


class ClonePermissionDeniedError(ProvisioningError):
    kind = ErrorKind.CLONE_PERMISSION_DENIED


class CloneFailedError(ProvisioningError):
    kind = ErrorKind.CLONE_FAILED


class DependencyInstallError(ProvisioningError):
    kind = ErrorKind.DEPENDENCY_INSTALL_FAILED


class ConfigTemplateMissingError(ProvisioningError):
    kind = ErrorKind.CONFIG_TEMPLATE_MISSING


class StaticAssetsPathMissingError(ProvisioningError):
    kind = ErrorKind.STATIC_ASSETS_PATH_MISSING
