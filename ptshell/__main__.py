from __future__ import annotations

import sys

from ptshell.shell_host import main

sys.exit(main())
