#!/usr/bin/env python
# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from cleo import Application as BaseApplication
from clikit.api.args.format.argument import Argument
from clikit.api.args.format.option import Option
from clikit.api.event import PRE_HANDLE, PRE_RESOLVE
from clikit.api.formatter import Formatter
from clikit.api.formatter.style_set import StyleSet
from clikit.api.io import Input, Output
from clikit.api.io.flags import DEBUG, NORMAL, VERBOSE, VERY_VERBOSE
from clikit.api.io.input_stream import InputStream
from clikit.api.io.output_stream import OutputStream
from clikit.config import DefaultApplicationConfig
from clikit.formatter import AnsiFormatter, PlainFormatter
from clikit.handler.help import HelpTextHandler
from clikit.io.console_io import ConsoleIO
from clikit.io.input_stream import StandardInputStream
from clikit.io.output_stream import ErrorOutputStream, StandardOutputStream
from clikit.resolver.help_resolver import HelpResolver

from fundkrawl import __version__
from fundkrawl.cli.command.fetch import FetchCommand
from fundkrawl.cli.command.validate import ValidateCommand
from fundkrawl.log import COLORED_FORMAT, configure_logger, verbosity_to_level

# number of '-v' flags -> clikit verbosity
_IO_VERBOSITIES = [NORMAL, VERBOSE, VERY_VERBOSE, DEBUG]


class Application(BaseApplication):

    def __init__(self):
        super().__init__(config=ApplicationConfig())
        self.add(FetchCommand())
        self.add(ValidateCommand())


def create_formatter(output_stream: OutputStream, style_set: StyleSet) -> Formatter:
    if output_stream.supports_ansi():
        return AnsiFormatter(style_set)
    return PlainFormatter(style_set)


def _count_verbosity(args) -> int:
    for verbosity, token in [(3, "-vvv"), (2, "-vv"), (1, "-v")]:
        if args.has_option_token(token):
            return verbosity
    return 0


class ApplicationConfig(DefaultApplicationConfig):

    def __init__(self):
        super().__init__(name="fundkrawl", version=__version__)

    def configure(self):
        self.set_io_factory(self.create_io)
        self.add_event_listener(PRE_RESOLVE, self.resolve_help_command)
        self.add_event_listener(PRE_HANDLE, self.print_version)

        self.add_option("help", "h", Option.NO_VALUE, "Display this help message")
        self.add_option(
            "verbose",
            "v",
            Option.NO_VALUE,
            "Increase the verbosity of messages: '-v' for warnings, '-vv' for info and '-vvv' for debug",
        )
        self.add_option("version", None, Option.NO_VALUE, "Display this application version")
        self.add_option("no-ansi", None, Option.NO_VALUE, "Disable ANSI output")
        self.add_option("config", "c", Option.REQUIRED_VALUE, "Path to configuration file.")

        with self.command("help") as c:
            c.default()
            c.set_description("Display the manual of a command")
            c.add_argument("command", Argument.OPTIONAL | Argument.MULTI_VALUED, "The command name")
            c.set_handler(HelpTextHandler(HelpResolver()))

    def create_io(self,
                  application,
                  args,
                  input_stream: InputStream = None,
                  output_stream: OutputStream = None,
                  error_stream: OutputStream = None) -> ConsoleIO:
        input_stream = input_stream or StandardInputStream()
        output_stream = output_stream or StandardOutputStream()
        error_stream = error_stream or ErrorOutputStream()

        style_set = application.config.style_set
        if args.has_option_token("--no-ansi"):
            output_formatter = error_formatter = PlainFormatter(style_set)
        else:
            output_formatter = create_formatter(output_stream, style_set)
            error_formatter = create_formatter(error_stream, style_set)

        io = self.io_class(
            Input(input_stream),
            Output(output_stream, output_formatter),
            Output(error_stream, error_formatter),
        )

        verbosity = _count_verbosity(args)
        io.set_verbosity(_IO_VERBOSITIES[verbosity])
        configure_logger(verbosity_to_level(verbosity), COLORED_FORMAT, io.error_output)

        return io


def main():
    application = Application()
    application.run()


if __name__ == '__main__':
    main()
