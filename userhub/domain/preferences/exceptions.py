# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from userhub.shared.errors.base import NotFoundError


class PreferenceNotFoundError(NotFoundError):
    code = "preference_not_found"
