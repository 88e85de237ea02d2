# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

__version__ = "0.1.0"
