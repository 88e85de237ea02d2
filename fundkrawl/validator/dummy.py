# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from fundkrawl.model.manifest import Manifest
from fundkrawl.validator import Validator


class DummyValidator(Validator):

    def validate(self, manifest: Manifest) -> tuple[Manifest, list[str] | None]:
        return manifest, None
