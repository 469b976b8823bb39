"""SchoolPortal Backend.

User lifecycle and enrollment service for a bilingual school portal whose
data lives in a PocketBase record store.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
