# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models for records, requests and results.

Modules:
    common: LocalizedText union and its normalization function.
    lookup: Grade, Section and Subject reference records.
    user: Users, profiles, creation requests and results.
    deletion: Dependency reports and deletion/reassignment results.
"""
