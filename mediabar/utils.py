#!/usr/bin/env python3
''' assorted helpers '''

import logging
import os
import traceback
import typing as t

import jinja2

if t.TYPE_CHECKING:
    import mediabar.statestore

DISPLAYHELPERS = [
    'display_title', 'display_artist', 'display_album', 'menubar_text', 'truncated_menubar_text',
    'formatted_duration', 'formatted_elapsed_time', 'progress', 'has_artwork'
]


class TemplateHandler():  # pylint: disable=too-few-public-methods
    ''' Set up a template  '''

    def __init__(self, filename: str | None = None, rawtemplate: str | None = None):
        self.envdir = envdir = None
        self.template: jinja2.Template | None = None
        self.filename = filename

        if rawtemplate:
            self.template = jinja2.Environment(
                finalize=self._finalize, autoescape=False).from_string(rawtemplate)
            return

        if not self.filename:
            return

        if os.path.exists(self.filename):
            envdir = os.path.dirname(self.filename)
        else:
            logging.error('%s does not exist!', self.filename)
            return

        if not self.envdir or self.envdir != envdir:
            self.envdir = envdir
            self.env = self.setup_jinja2(self.envdir)

        basename = os.path.basename(self.filename)

        self.template = self.env.get_template(basename)

    @staticmethod
    def _finalize(variable):
        ''' helper routine to avoid NoneType exceptions '''
        if variable:
            return variable
        return ''

    def setup_jinja2(self, directory: str) -> jinja2.Environment:
        ''' set up the environment '''
        return jinja2.Environment(loader=jinja2.FileSystemLoader(directory),
                                  finalize=self._finalize,
                                  autoescape=jinja2.select_autoescape(['htm', 'html', 'xml']))

    def generate(self, metadatadict: dict[str, t.Any] | None = None) -> str:
        ''' get the generated template '''
        logging.debug('generating data for %s', self.filename)

        rendertext = 'Template has syntax errors'
        try:
            if not self.template:
                return " No template found; check mediabar settings."
            if metadatadict:
                rendertext = self.template.render(**metadatadict)
            else:
                rendertext = self.template.render()
        except Exception:  # pylint: disable=broad-exception-caught
            for line in traceback.format_exc().splitlines():
                logging.error(line)
        return rendertext


def templatedict(status: "mediabar.statestore.ServiceStatus") -> dict[str, t.Any]:
    ''' flatten a status into template variables

        media fields use their JSON names; display helpers and the
        status axes are added on top
    '''
    values: dict[str, t.Any] = dict(status.current.to_payload())
    for helper in DISPLAYHELPERS:
        values[helper] = getattr(status.current, helper)
    values['isloading'] = status.isloading
    values['lasterror'] = status.lasterror
    values['status_text'] = status.status_text
    values['has_valid_media'] = status.has_valid_media
    return values
