#!/usr/bin/env python3
import argparse
import logging
import sys
from pathlib import Path

from bundle_props import (
    PROPERTIES_SUFFIX,
    is_right_to_left,
    locale_fragment,
    normalize_locale_tag,
    read_properties,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"
RECORD_SEPARATOR = "----"


class ExtractorError(Exception):
    """Fatal problem that stops the extraction."""


class ConfigurationError(ExtractorError):
    pass


class ResourceNotFoundError(ExtractorError):
    pass


class Bundle:
    def __init__(self, locale: str, path: Path, messages):
        self.locale = locale
        self.path = path
        self.messages = messages

    def get(self, key: str):
        return self.messages.get(key)


class ExtractionSummary:
    def __init__(self, locales=None):
        self.keys = 0
        self.locales = locales if locales is not None else []
        self.missing = 0
        self.right_to_left = 0


def init_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def load_bundle(path: Path, locale: str) -> Bundle:
    try:
        messages = read_properties(path)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise ResourceNotFoundError(f"Cannot read bundle file {path}: {exc}") from exc
    return Bundle(locale=locale, path=path, messages=messages)


def find_default_file(base_dir: Path, bundle_name: str):
    default_fragment = DEFAULT_LOCALE.replace("-", "_").lower()
    for path in sorted(base_dir.iterdir()):
        fragment = locale_fragment(path.name, bundle_name)
        if fragment and fragment.lower() == default_fragment and path.is_file():
            return path
    fallback = base_dir / f"{bundle_name}{PROPERTIES_SUFFIX}"
    if fallback.is_file():
        return fallback
    return None


def load_default_bundle(base_dir: Path, bundle_name: str) -> Bundle:
    path = find_default_file(base_dir, bundle_name)
    if path is None:
        raise ResourceNotFoundError("Specified bundle not found.")
    logger.info("Reading key set from %s", path.name)
    return load_bundle(path, DEFAULT_LOCALE)


def discover_locale_files(base_dir: Path, bundle_name: str):
    prefix = f"{bundle_name}_"
    found = []
    for path in sorted(base_dir.iterdir()):
        if not path.name.startswith(prefix) or not path.is_file():
            continue
        if locale_fragment(path.name, bundle_name) is None:
            logger.warning("Skipping %s: no <lang>_<region> locale in name", path.name)
            continue
        found.append(path)
    return found


def load_locale_bundles(paths, bundle_name: str):
    bundles = []
    seen = {}
    for path in paths:
        fragment = locale_fragment(path.name, bundle_name)
        if fragment is None:
            raise ResourceNotFoundError(f"Not a locale file of {bundle_name}: {path.name}")
        tag = normalize_locale_tag(fragment)
        if tag in seen:
            logger.warning(
                "Skipping %s: locale %s already loaded from %s",
                path.name,
                tag,
                seen[tag].name,
            )
            continue
        seen[tag] = path
        bundles.append(load_bundle(path, tag))
    return bundles


def format_record(key: str, bundles, missing=None) -> str:
    lines = []
    for bundle in bundles:
        value = bundle.get(key)
        if value is None:
            logger.warning("Key %r missing from %s (%s)", key, bundle.path.name, bundle.locale)
            if missing is not None:
                missing.append(bundle.locale)
            continue
        lines.append(value + "\n")
    lines.append(RECORD_SEPARATOR + "\n")
    return "".join(lines)


def extract(base_dir: Path, bundle_name: str, out_file: Path) -> ExtractionSummary:
    base_dir = base_dir.resolve()
    if not base_dir.is_dir():
        raise ConfigurationError(f"Invalid directory specified: {base_dir}")

    default = load_default_bundle(base_dir, bundle_name)
    keys = sorted(default.messages)

    paths = discover_locale_files(base_dir, bundle_name)
    if not paths:
        raise ResourceNotFoundError(f"No locales available at {base_dir}")
    bundles = load_locale_bundles(paths, bundle_name)

    summary = ExtractionSummary(locales=[b.locale for b in bundles])
    with out_file.open("w", encoding="utf-8", newline="\n") as writer:
        for key in keys:
            missing = []
            writer.write(format_record(key, bundles, missing))
            summary.keys += 1
            summary.missing += len(missing)
            summary.right_to_left += sum(
                1
                for bundle in bundles
                if key in bundle.messages and is_right_to_left(bundle.messages[key], bundle.locale)
            )
    return summary


def build_parser():
    parser = argparse.ArgumentParser(
        prog="extract-bundle",
        description="Write every localized message of a bundle into one UTF-8 file.",
    )
    parser.add_argument("input_directory", help="directory holding the .properties files")
    parser.add_argument("bundle_name", help="bundle base name, e.g. MessageResources")
    parser.add_argument("output_file", help="file to write (overwritten)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    init_logging()

    out_file = Path(args.output_file)
    try:
        summary = extract(Path(args.input_directory), args.bundle_name, out_file)
    except ExtractorError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError as exc:
        logger.error("I/O error while extracting to %s: %s", out_file, exc)
        return 1

    logger.info(
        "Wrote %d keys for locales %s to %s (%d missing values, %d right-to-left values)",
        summary.keys,
        ", ".join(summary.locales),
        out_file,
        summary.missing,
        summary.right_to_left,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
