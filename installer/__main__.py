# -*- coding: utf-8 -*-
from installer.cli import main

if __name__ == "__main__":
    main()
