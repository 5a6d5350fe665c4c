import sys

from docker_binary_installer.cli import main

sys.exit(main())
