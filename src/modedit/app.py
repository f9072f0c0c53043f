from __future__ import annotations

from pathlib import Path

import click

from modedit import files
from modedit.editor.session import Session
from modedit.logger import configure_logging, logger
from modedit.settings import ConfigError, Settings, load_settings
from modedit.tui.input import base as input_base
from modedit.tui.input import posix as input_posix
from modedit.tui.screen import Screen


class App:
    def __init__(
        self,
        session: Session,
        reader: input_base.KeyReader,
        screen: Screen,
        poll_interval: float = 0.1,
    ) -> None:
        self._session = session
        self._reader = reader
        self._screen = screen
        self._poll_interval = poll_interval

    @property
    def session(self) -> Session:
        return self._session

    def run(self) -> None:
        session = self._session
        with self._reader, self._screen:
            self._screen.draw(session.snapshot())
            while not session.exit_requested:
                events = self._reader.poll(self._poll_interval)
                if not events:
                    # Timeouts still run a cycle so the screen is redrawn.
                    session.step(None)
                for event in events:
                    session.step(event)
                    if session.exit_requested:
                        break
                self._screen.draw(session.snapshot())


def build_app(path: Path | None, settings: Settings) -> App:
    text = files.load_text(path)
    session = Session(text=text, path=path, settings=settings.editor)
    reader = input_posix.PosixKeyReader(
        esc_sequence_timeout=settings.editor.esc_sequence_timeout
    )
    screen = Screen(status_height_ratio=settings.editor.status_height_ratio)
    return App(
        session,
        reader,
        screen,
        poll_interval=settings.editor.poll_interval,
    )


@click.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file.",
)
def main(path: Path | None, config_path: Path | None) -> None:
    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    configure_logging(settings.logging)
    app = build_app(path, settings)
    logger.info("Editor started", path=app.session.title)
    try:
        app.run()
    except EOFError:
        logger.warning("Input closed, exiting")


if __name__ == "__main__":
    main()
