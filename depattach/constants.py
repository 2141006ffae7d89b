#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Shared constants for depattach.

This module provides the centralized constants and the exception hierarchy used
by the attachment library and the attachDeps.py front end.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Scope Constants
# =============================================================================

ALLOWED_SCOPES = ("PUBLIC", "PRIVATE", "INTERFACE")

# Scope used for mutations that cannot take an unset scope
# (include dirs, link dirs, compile definitions)
IMPLIED_SCOPE = "PUBLIC"

# =============================================================================
# Library Constants
# =============================================================================

# Build configuration keywords that bind to the library following them
LIBRARY_CONFIG_KEYWORDS = ("debug", "optimized", "general")

# =============================================================================
# Environment
# =============================================================================

# Ordered chain of install prefixes, overlays first
PREFIX_PATH_ENV = "AMENT_PREFIX_PATH"

# See no-color.org
NO_COLOR_ENV = "NO_COLOR"

# =============================================================================
# Build Description Constants
# =============================================================================

DEFAULT_TARGET_KIND = "library"
TARGET_KINDS = ("library", "executable", "interface")
LEGACY_FIELDS = ("include_dirs", "libraries", "library_dirs", "definitions")

# =============================================================================
# Exception Classes
# =============================================================================


class DepAttachError(Exception):
    """Base exception for all depattach errors.

    All depattach exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(DepAttachError):
    """Raised when input validation fails (arguments, files, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class InvalidArgumentError(ValidationError):
    """Raised for unrecognized arguments or an out-of-set scope value."""


class BuildDescriptionError(ValidationError):
    """Raised when a build description file is missing or malformed."""


# Precondition errors (EXIT_RUNTIME_ERROR)
class PreconditionError(DepAttachError):
    """Raised when a target does not exist or a package was never resolved."""
