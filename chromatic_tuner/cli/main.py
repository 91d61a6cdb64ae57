"""Main entry point for the Chromatic Tuner CLI."""

import time
from collections import Counter
from typing import Optional, Union

import click

from ..logger import get_logger
from ..logging_config import setup_logging
from ..core.config import ConfigManager
from ..core.errors import TunerError
from ..core.factory import ComponentFactory
from ..audio.tuner_service import TunerService
from ..note_types import TunerReading
from .display import format_reading, big_note

logger = get_logger(__name__)

DETECTORS = ["autocorrelation", "yin"]


def _factory(config_dir: Optional[str]) -> ComponentFactory:
    return ComponentFactory(ConfigManager(config_dir))


def _device(value: Optional[str]) -> Optional[Union[int, str]]:
    """Device option: an index if numeric, otherwise a name fragment."""
    if value is None:
        return None
    return int(value) if value.isdigit() else value


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "--config-dir",
    envvar="CHROMATIC_TUNER_CONFIG_DIR",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding tuner.json and audio_input.json.",
)
@click.pass_context
def cli(ctx, debug, config_dir):
    """Chromatic Tuner - real-time pitch detection for tuning instruments."""
    # Keep the readout clean unless asked for diagnostics
    setup_logging(level="DEBUG" if debug else "WARNING")
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


@cli.command()
@click.option("--device", "-d", default=None, help="Input device index or name fragment.")
@click.option("--sample-rate", type=int, default=None, help="Sample rate in Hz.")
@click.option("--block-size", type=int, default=None, help="Samples per analysis block.")
@click.option("--duration", "-t", type=float, default=None, help="Stop after this many seconds.")
@click.option("--detector", type=click.Choice(DETECTORS), default="autocorrelation")
@click.option("--big", is_flag=True, help="Show the note as a large banner when it changes.")
@click.option("--flats", is_flag=True, help="Name notes with flats (Bb) instead of sharps (A#).")
@click.pass_context
def listen(ctx, device, sample_rate, block_size, duration, detector, big, flats):
    """Tune live from the microphone until Ctrl-C."""
    factory = _factory(ctx.obj["config_dir"])

    overrides = {"device_id": _device(device)}
    if sample_rate:
        overrides["sample_rate"] = sample_rate
    if block_size:
        overrides["frames_per_buffer"] = block_size

    last_note = {"name": None}

    def on_reading(reading: TunerReading) -> None:
        name = reading.label(flats) if reading.is_pitched else None
        if big and name and name != last_note["name"]:
            click.echo(big_note(name))
        last_note["name"] = name
        click.echo("\r" + format_reading(reading, use_flats=flats), nl=False)

    try:
        audio_input = factory.create_audio_input("sounddevice", **overrides)
        engine = factory.create_engine(audio_input=audio_input, detector=detector)
        service = TunerService(engine)
        service.start(on_reading)
    except (TunerError, OSError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Listening at {engine.sample_rate} Hz, press Ctrl-C to stop", err=True)
    started = time.time()
    try:
        while duration is None or time.time() - started < duration:
            time.sleep(0.1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        service.stop()
        click.echo("")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--block-size", type=int, default=None, help="Samples per analysis block.")
@click.option("--detector", type=click.Choice(DETECTORS), default="autocorrelation")
@click.option("--summary", is_flag=True, help="Only print the summary.")
@click.option("--flats", is_flag=True, help="Name notes with flats (Bb) instead of sharps (A#).")
@click.pass_context
def analyze(ctx, path, block_size, detector, summary, flats):
    """Run the tuner over an audio file, one line per block."""
    factory = _factory(ctx.obj["config_dir"])

    overrides = {"file_path": path, "realtime": False}
    if block_size:
        overrides["frames_per_buffer"] = block_size

    try:
        audio_input = factory.create_audio_input("file", **overrides)
        engine = factory.create_engine(detector=detector, sample_rate=audio_input.sample_rate)
    except TunerError as e:
        raise click.ClickException(str(e))

    notes: Counter = Counter()
    blocks = 0
    block_seconds = audio_input.frames_per_buffer / audio_input.sample_rate
    for index, block in enumerate(audio_input.iter_blocks()):
        reading = engine.process_block(block, timestamp=index * block_seconds)
        blocks += 1
        if reading.is_pitched:
            notes[reading.label(flats)] += 1
        if not summary:
            click.echo(format_reading(reading, elapsed=reading.timestamp, use_flats=flats))

    pitched = sum(notes.values())
    if not pitched:
        click.echo(f"No pitch detected in {blocks} blocks")
        return

    note, count = notes.most_common(1)[0]
    click.echo(f"Most common note: {note} ({count}/{pitched} pitched blocks of {blocks})")


@cli.command()
def devices():
    """List audio input devices."""
    try:
        from ..audio.audio_input import list_input_devices

        found = list_input_devices()
    except (TunerError, OSError) as e:
        raise click.ClickException(f"Audio system unavailable: {e}")

    if not found:
        click.echo("No input devices found")
        return
    for device in found:
        click.echo(
            f"[{device['id']}] {device['name']} "
            f"(inputs: {device['channels']}, {device['default_samplerate']:.0f} Hz)"
        )


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
