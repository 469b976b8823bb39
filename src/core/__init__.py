# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for the school portal service.

This package contains configuration and cross-cutting definitions:
- config: Application configuration and settings
- errors: Error taxonomy shared by the store client and domain services
"""
