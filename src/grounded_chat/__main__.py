import sys

from grounded_chat.cli import main

sys.exit(main())
