"""Command-line interface for text2podcast."""

import argparse
import logging
import sys
from pathlib import Path

from text2podcast import __version__
from text2podcast.audio.audio_utils import check_ffmpeg
from text2podcast.models import (
    DEFAULT_CEILING,
    AudioRequirements,
    PipelineSettings,
    PodcastMetadata,
    TTSConfig,
    ValidationReport,
)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="text2podcast",
        description="Convert long-form text into a tagged podcast MP3",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "input_file",
        nargs="?",
        help="Text file to convert ('-' reads stdin); with --validate-only, an audio file",
    )
    parser.add_argument(
        "output_file",
        nargs="?",
        help="Output MP3 (default: standard episode file name in the current directory)",
    )

    parser.add_argument(
        "-e", "--engine",
        default="openai",
        choices=["openai", "edge"],
        help="TTS engine to use (default: openai)",
    )
    parser.add_argument("-v", "--voice", default=None, help="Voice name (engine specific)")
    parser.add_argument("-s", "--speed", type=float, default=1.0, help="Speaking speed (default: 1.0)")
    parser.add_argument(
        "-l", "--language",
        default=None,
        help="Language filter for --list-voices",
    )
    parser.add_argument(
        "--list-voices",
        action="store_true",
        help="List the voices of the selected engine and exit",
    )

    episode = parser.add_argument_group("episode metadata")
    episode.add_argument("-t", "--title", default=None, help="Episode title (default: input file name)")
    episode.add_argument("-n", "--episode", type=int, default=1, help="Episode number (default: 1)")
    episode.add_argument("--subtitle", default="", help="Episode subtitle (default: title)")
    episode.add_argument("--description", default="", help="Show notes summary")
    episode.add_argument("--author", default="Speasy", help="Episode author (itunes:author tag)")
    episode.add_argument("--category", default="Technology", help="iTunes category")
    episode.add_argument("--explicit", action="store_true", help="Mark the episode explicit")

    limits = parser.add_argument_group("pipeline limits")
    limits.add_argument(
        "--ceiling",
        type=int,
        default=DEFAULT_CEILING,
        help=f"Max characters per synthesis request (default: {DEFAULT_CEILING})",
    )
    limits.add_argument("--max-attempts", type=int, default=3, help="Attempts per chunk (default: 3)")
    limits.add_argument("--min-bitrate", type=float, default=64, help="Minimum bitrate kbps (default: 64)")
    limits.add_argument("--max-bitrate", type=float, default=320, help="Maximum bitrate kbps (default: 320)")
    limits.add_argument("--max-size-mb", type=float, default=200, help="Maximum file size in MB (default: 200)")
    limits.add_argument(
        "--sample-rates",
        default="44100,48000",
        help="Comma-separated allowed sample rates (default: 44100,48000)",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate an existing audio file and print the report",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        requirements = AudioRequirements(
            max_file_size_bytes=int(args.max_size_mb * 1024 * 1024),
            min_bitrate=args.min_bitrate,
            max_bitrate=args.max_bitrate,
            allowed_sample_rates=tuple(int(r) for r in args.sample_rates.split(",") if r.strip()),
        )
    except ValueError:
        parser.error(f"Invalid --sample-rates: {args.sample_rates}")

    from text2podcast.tts import get_engine, load_builtin_engines

    load_builtin_engines()

    if args.list_voices:
        engine = get_engine(args.engine)
        engine.initialize()
        voices = engine.list_voices(args.language)
        print(f"\nAvailable voices ({engine.name}):\n")
        for v in voices:
            print(f"  {v['name']:<35} {v['language']:<10} {v.get('gender', '')}")
        sys.exit(0)

    if not args.input_file:
        parser.error("An input file is required")

    if args.validate_only:
        check_ffmpeg()
        from text2podcast.audio.validator import validate

        report = validate(Path(args.input_file), requirements)
        _print_report(report)
        sys.exit(0 if report.is_valid else 1)

    if args.input_file == "-":
        text = sys.stdin.read()
        default_title = "Untitled"
    else:
        input_path = Path(args.input_file)
        if not input_path.exists():
            parser.error(f"File not found: {input_path}")
        text = input_path.read_text(encoding="utf-8")
        default_title = input_path.stem

    metadata = PodcastMetadata(
        title=args.title or default_title,
        episode_number=args.episode,
        subtitle=args.subtitle,
        description=args.description,
        author=args.author,
        category=args.category,
        explicit=args.explicit,
    )
    settings = PipelineSettings(ceiling=args.ceiling, max_attempts=args.max_attempts)
    config = TTSConfig(voice=args.voice or "", speed=args.speed)

    check_ffmpeg()
    engine = get_engine(args.engine)
    engine.initialize()

    from text2podcast.converter import Converter
    from text2podcast.progress import ProgressReporter

    converter = Converter(engine, config, requirements=requirements, settings=settings)

    # Chunk count is only known once segmentation ran
    progress = {"reporter": None}

    def on_progress(current: int, total: int) -> None:
        if progress["reporter"] is None:
            progress["reporter"] = ProgressReporter(total)
        progress["reporter"].update(current, total)

    try:
        result = converter.convert(text, metadata, on_progress=on_progress)
    except KeyboardInterrupt:
        print("\n\nConversion interrupted.")
        sys.exit(1)
    except Exception as e:
        logging.error("Error: %s", e)
        if args.verbose:
            logging.exception("Details:")
        sys.exit(1)
    finally:
        if progress["reporter"]:
            progress["reporter"].close()

    output_path = Path(args.output_file) if args.output_file else Path(result.filename)
    output_path.write_bytes(result.artifact.data)

    _print_report(result.report)
    print(f"\nPodcast audio written: {output_path}")
    if not result.succeeded:
        sys.exit(1)


def _print_report(report: ValidationReport) -> None:
    probe = report.metadata
    print(f"\nValid: {'yes' if report.is_valid else 'no'}")
    if probe.bitrate is not None:
        print(f"  bitrate:     {probe.bitrate:g} kbps")
    if probe.sample_rate is not None:
        print(f"  sample rate: {probe.sample_rate} Hz")
    if probe.duration is not None:
        print(f"  duration:    {probe.duration:.1f} s")
    for error in report.errors:
        print(f"  error:   {error}")
    for warning in report.warnings:
        print(f"  warning: {warning}")


if __name__ == "__main__":
    main()
