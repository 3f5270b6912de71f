#!/usr/bin/env python3
"""Text Output Notification Plugin"""

import logging
from typing import TYPE_CHECKING

import mediabar.utils
from . import NotificationPlugin

if TYPE_CHECKING:
    import mediabar.config
    import mediabar.statestore
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module


class Plugin(NotificationPlugin):
    """Text Output Notification Handler"""

    def __init__(
        self,
        config: "mediabar.config.ConfigFile | None" = None,
        qsettings: "QSettings | None" = None,
    ):
        super().__init__(config=config, qsettings=qsettings)
        self.displayname = "Text Output"
        self.enabled = False
        self.output_file: str | None = None
        self.template_file: str | None = None
        self.txttemplatehandler: mediabar.utils.TemplateHandler | None = None

    async def notify_status_change(self, status: "mediabar.statestore.ServiceStatus") -> None:
        """
        Write the rendered status to the text file

        Args:
            status: the new loading flag, error text and current media
        """

        self._setup_handler()
        if not self.enabled or not self.output_file or not self.txttemplatehandler:
            return

        try:
            txttemplate = self.txttemplatehandler.generate(mediabar.utils.templatedict(status))

            # need to specifically open as utf-8 for frozen builds
            with open(self.output_file, "w", encoding="utf-8") as textfh:
                textfh.write(txttemplate)

            logging.debug("Text output written to: %s", self.output_file)

        except Exception as error:  # pylint: disable=broad-except
            logging.error("Text output notification failed: %s", error)

    def _setup_handler(self):
        if not self.config:
            self.enabled = False
            return

        new_output_file: str | None = self.config.cparser.value(
            "textoutput/file", defaultValue=None
        )
        new_template_file: str | None = self.config.cparser.value(
            "textoutput/txttemplate", defaultValue=None
        )

        if not new_output_file:
            self.enabled = False
            return

        self.enabled = True
        if new_output_file != self.output_file:
            self.output_file = new_output_file

        if not new_template_file:
            if self.template_file or not self.txttemplatehandler:
                self.template_file = None
                self.txttemplatehandler = mediabar.utils.TemplateHandler(
                    rawtemplate="{{ status_text }}"
                )
        elif new_template_file != self.template_file:
            self.template_file = new_template_file
            self.txttemplatehandler = mediabar.utils.TemplateHandler(filename=new_template_file)
            logging.debug("Text output template reloaded: %s", self.template_file)

    async def start(self) -> None:
        """Initialize the text output notification plugin"""
        self._setup_handler()

        if not self.enabled:
            logging.debug("Text output disabled - no output file configured")
            return

        if self.config.cparser.value("textoutput/clearonstartup", type=bool) and self.output_file:
            try:
                with open(self.output_file, "w", encoding="utf-8") as textfh:
                    _ = textfh.write("")
                logging.debug("Text output file cleared on startup: %s", self.output_file)
            except Exception as error:  # pylint: disable=broad-except
                logging.error("Failed to clear text output file: %s", error)

    async def stop(self) -> None:
        """Clean up the text output notification plugin"""
        if self.enabled:
            logging.debug("Text output notifications stopped")

    def defaults(self, qsettings: "QSettings"):
        """Set default configuration values"""
        qsettings.setValue("textoutput/file", None)
        qsettings.setValue("textoutput/clearonstartup", True)
