"""Allow ``python -m dicom_organizer``."""

import sys

from dicom_organizer.cli.main import main

sys.exit(main())
