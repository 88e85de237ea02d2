# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from fundkrawl.cli.command import KrawlCommand
from fundkrawl.cli.command.validate.config import ValidateConfigCommand
from fundkrawl.cli.command.validate.manifest import ValidateManifestCommand


class ValidateCommand(KrawlCommand):
    """Validate resources.

    validate
    """

    commands = [
        ValidateConfigCommand(),
        ValidateManifestCommand(),
    ]

    def handle(self):
        self.call("help", "validate")
