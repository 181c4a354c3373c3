"""Command-Line Interface handler for LyricSync."""

import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO

from tqdm import tqdm

from .config_loader import DEFAULT_CONFIG_PATH, ConfigLoader
from .exceptions import LyricSyncError, ConfigurationError, FileSystemError
from .follower import LyricsFollower
from .log_setup import setup_logging
from .lrc_parser import parse_lrc
from .lyrics_provider import LrcLibClient, LyricsProvider
from .models import SessionFrame
from .playback import PlaybackSource, SpotifyPlaybackSource
from .session import LyricsSession
from .translation_cache import TranslationCache
from .translator import HuggingFaceTranslator, Translator
from .utils import format_offset

logger = logging.getLogger(__name__)

class CLIHandler:
    """Parses arguments and runs the LyricSync commands."""

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        translator: Optional[Translator] = None,
        lyrics_provider: Optional[LyricsProvider] = None,
        playback_source: Optional[PlaybackSource] = None,
    ):
        """
        Initializes the CLIHandler.

        The optional collaborators replace the ones built from configuration,
        which lets the commands run without network access or model downloads.
        """
        self.stdout = stdout or sys.stdout
        self._translator = translator
        self._lyrics_provider = lyrics_provider
        self._playback_source = playback_source
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="LyricSync: follow Spotify playback and show translated, time-synced lyrics.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        parser.add_argument(
            "-c", "--config",
            default=DEFAULT_CONFIG_PATH,
            help="Path to a configuration YAML file. Built-in defaults are used if the default file is absent."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        follow = subparsers.add_parser("follow", help="Follow Spotify playback and print translated lines.")
        follow.add_argument("-l", "--language", default=None, help="Target language name, e.g. Turkish.")
        follow.add_argument("--interval", type=float, default=None, help="Poll interval in seconds.")
        follow.add_argument("--device", default=None, choices=["cuda", "cpu"], help="Translation device.")
        follow.add_argument("--max-ticks", type=int, default=None, help="Stop after this many polls.")

        lyrics = subparsers.add_parser("lyrics", help="Look up and print the synced lyrics of a track.")
        lyrics.add_argument("-t", "--title", required=True, help="Track title.")
        lyrics.add_argument("-a", "--artist", required=True, help="Artist name.")
        lyrics.add_argument("--album", default=None, help="Album name.")
        lyrics.add_argument("--duration", type=float, default=None, help="Track duration in seconds.")

        translate = subparsers.add_parser("translate", help="Translate every line of a local LRC file.")
        translate.add_argument("lrc_file", help="Path to the .lrc file.")
        translate.add_argument("-l", "--language", default=None, help="Target language name, e.g. Turkish.")
        translate.add_argument("--device", default=None, choices=["cuda", "cpu"], help="Translation device.")
        translate.add_argument("-o", "--output", default=None, help="Write the result here instead of stdout.")

        return parser

    # --- Component construction ---

    def _build_translator(self, config: dict) -> Translator:
        if self._translator is not None:
            return self._translator
        return HuggingFaceTranslator(
            model_template=config["translation_model_template"],
            source_lang=config["source_language"],
            device=config["device"],
            model_overrides=config.get("translation_models") or {},
        )

    def _build_cache(self, config: dict) -> TranslationCache:
        return TranslationCache(
            self._build_translator(config),
            ttl_seconds=config["cache_ttl_seconds"],
            default_language_code=config["default_language_code"],
        )

    def _build_lyrics_provider(self, config: dict) -> LyricsProvider:
        if self._lyrics_provider is not None:
            return self._lyrics_provider
        return LrcLibClient(
            base_url=config["lrclib_base_url"],
            user_agent=config["lrclib_user_agent"],
            timeout=config["request_timeout_seconds"],
        )

    def _build_playback_source(self, config: dict) -> PlaybackSource:
        if self._playback_source is not None:
            return self._playback_source
        return SpotifyPlaybackSource.from_config(config)

    # --- Commands ---

    def _print_frame(self, frame: SessionFrame) -> None:
        if not frame.line_changed:
            return
        out = self.stdout
        state = "" if frame.is_playing else " (paused)"
        out.write(f"\n{frame.track.describe()} [{format_offset(frame.position_ms)}]{state}\n")
        if not frame.has_lyrics:
            out.write("  (no synced lyrics)\n")
        elif frame.current is None:
            out.write("  ...\n")
        else:
            out.write(f"  > {frame.current.text}\n")
            if frame.current_translation and frame.current_translation != frame.current.text:
                out.write(f"    {frame.current_translation}\n")
        if frame.next is not None:
            out.write(f"    next: {frame.next.text}\n")
        out.flush()

    def follow(self, args: argparse.Namespace, config: dict) -> int:
        session = LyricsSession(
            lyrics_provider=self._build_lyrics_provider(config),
            translation_cache=self._build_cache(config),
            language=config["target_language"],
        )
        follower = LyricsFollower(
            playback_source=self._build_playback_source(config),
            session=session,
            on_frame=self._print_frame,
            interval=config["poll_interval_seconds"],
        )
        follower.run(max_ticks=args.max_ticks)
        return 0

    def lyrics(self, args: argparse.Namespace, config: dict) -> int:
        provider = self._build_lyrics_provider(config)
        result = provider.lookup(args.title, args.artist, args.album, args.duration)
        if result is None:
            self.stdout.write("No lyrics found.\n")
            return 1
        timeline = parse_lrc(result.synced_lyrics)
        if not timeline:
            self.stdout.write("No synced lyrics available.\n")
            if result.plain_lyrics:
                self.stdout.write(result.plain_lyrics + "\n")
            return 0
        for line in timeline:
            self.stdout.write(f"{format_offset(line.offset_ms)}  {line.text}\n")
        return 0

    def translate(self, args: argparse.Namespace, config: dict) -> int:
        if not os.path.isfile(args.lrc_file):
            raise FileSystemError(f"LRC file not found or is not a file: {args.lrc_file}")
        try:
            with open(args.lrc_file, "r", encoding="utf-8") as f:
                timeline = parse_lrc(f.read())
        except OSError as e:
            raise FileSystemError(f"Could not read LRC file {args.lrc_file}: {e}") from e
        if not timeline:
            logger.warning(f"No timed lines found in {args.lrc_file}.")
            return 1

        language = config["target_language"]
        cache = self._build_cache(config)
        texts = [line.text for line in timeline]
        translations = cache.translate_batch(
            tqdm(texts, desc=f"Translating to {language}", unit="line", file=sys.stderr),
            language,
        )
        rendered = [
            f"[{format_offset(line.offset_ms)}]{line.text} / {translations[line.text]}"
            for line in timeline
        ]

        if args.output:
            try:
                with open(args.output, "w", encoding="utf-8") as f:
                    f.write("\n".join(rendered) + "\n")
            except OSError as e:
                raise FileSystemError(f"Could not write {args.output}: {e}") from e
            logger.info(f"Translated lyrics saved to: {args.output}")
        else:
            self.stdout.write("\n".join(rendered) + "\n")
        return 0

    # --- Entry points ---

    def load_config(self, args: argparse.Namespace) -> dict:
        config_path = args.config
        if config_path == DEFAULT_CONFIG_PATH and not os.path.exists(config_path):
            logger.info(f"No {DEFAULT_CONFIG_PATH} in the working directory, using built-in defaults.")
            config_path = None
        config = ConfigLoader().load_config(config_path)

        # --- Apply CLI Overrides ---
        if getattr(args, "language", None):
            logger.info(f"Overriding target_language from config with CLI argument: {args.language}")
            config["target_language"] = args.language
        if getattr(args, "device", None):
            logger.info(f"Overriding device from config with CLI argument: {args.device}")
            config["device"] = args.device
        if getattr(args, "interval", None) is not None:
            if args.interval <= 0:
                raise ConfigurationError(f"--interval must be positive, got {args.interval}.")
            config["poll_interval_seconds"] = args.interval
        return config

    def execute(self, argv: Optional[List[str]] = None) -> int:
        """Runs one command and returns its exit code."""
        args = self.parser.parse_args(argv)

        log_level = getattr(logging, args.log_level.upper(), logging.INFO)
        # Console only until the config tells us where the log file goes
        setup_logging(log_level=log_level, log_dir=None)

        try:
            config = self.load_config(args)
        except (ConfigurationError, FileNotFoundError) as e:
            logger.critical(f"Failed to load configuration: {e}")
            return 1

        setup_logging(log_level=log_level, log_dir=config.get("log_dir"), log_file=config.get("log_file", "lyricsync.log"))

        commands = {"follow": self.follow, "lyrics": self.lyrics, "translate": self.translate}
        try:
            return commands[args.command](args, config)
        except LyricSyncError as e:
            logger.error(f"A LyricSync error occurred: {e}")
            return 1
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            return 1
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            return 2

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Parses arguments, runs the command and exits with its status."""
        sys.exit(self.execute(argv))
