# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Generates the encoding variants of the XML parser test fixtures.

Reads the canonical UTF-8 documents from the validation directory and writes
UTF-8, UTF-16LE, and UTF-16BE copies of them, each with and without a byte
order mark.  Run it from the directory that contains validation/, or pass
--validation-dir and --output-dir."""

import argparse
from collections.abc import Sequence
import logging
import pathlib
import sys
from typing import Optional

from encoding_fixtures import encodings

class GenerationError(Exception):
    """Base class for errors while generating fixtures."""

    def __init__(self, message: str,
                 unit: Optional[encodings.Unit] = None) -> None:
        super().__init__(message)
        self.unit = unit


class SourceFileNotFoundError(GenerationError):
    """A canonical validation document is missing."""


class SourceReadError(GenerationError):
    """A canonical validation document exists but can’t be read."""


class ConversionError(GenerationError):
    """A document can’t be represented in the target encoding."""


class OutputWriteError(GenerationError):
    """Writing a fixture file failed."""


class MissingDirectoryError(GenerationError):
    """Output directories don’t exist and weren’t supposed to be created."""


class UnitsFailedError(GenerationError):
    """Some units failed; raised at the end of a --keep-going run."""

    def __init__(self, errors: Sequence[GenerationError]) -> None:
        super().__init__(
            f'{len(errors)} of {_NUM_UNITS} units failed: '
            + ', '.join(str(e.unit) for e in errors))
        self.errors = tuple(errors)


def generate(validation_dir: pathlib.Path, output_root: pathlib.Path, *,
             create_dirs: bool = False, keep_going: bool = False) -> None:
    """Writes all fixture files below output_root.

    Existing fixture files are overwritten.  Unless keep_going is set, the
    first failing unit aborts the run.

    Raises:
      MissingDirectoryError if an output directory doesn’t exist and
        create_dirs is false
      SourceFileNotFoundError, SourceReadError, ConversionError,
        OutputWriteError for the first failing unit
      UnitsFailedError if keep_going is set and any unit failed
    """
    _prepare_directories(output_root, create_dirs)
    errors: list[GenerationError] = []
    for unit in encodings.units():
        try:
            _generate_unit(unit, validation_dir, output_root)
        except GenerationError as ex:
            if not keep_going:
                raise
            _logger.error('%s', ex)
            errors.append(ex)
    if errors:
        raise UnitsFailedError(errors)


def verify(validation_dir: pathlib.Path,
           output_root: pathlib.Path) -> list[str]:
    """Checks existing fixture files against the validation documents.

    Returns a list of problems, which is empty if all fixtures match.  Missing
    or unreadable fixture files are problems, too.

    Raises:
      SourceFileNotFoundError if a validation document is missing
      SourceReadError if a validation document can’t be read
    """
    problems = []
    for unit in encodings.units():
        source = unit.source(validation_dir)
        expected = _read_source(unit, source)
        bare_file = unit.output(output_root)
        bom_file = unit.output(output_root, bom=True)
        _logger.info('verifying %s and %s', bare_file, bom_file)
        bare = _read_fixture(bare_file, problems)
        if bare is not None:
            try:
                decoded = bare.decode(unit.encoding.codec, errors='strict')
            except UnicodeError as ex:
                problems.append(
                    f'{bare_file} isn’t valid {unit.encoding.value}: {ex}')
            else:
                if decoded.encode('utf-8') != expected:
                    problems.append(f'{bare_file} doesn’t match {source}')
        with_bom = _read_fixture(bom_file, problems)
        if with_bom is None:
            continue
        bom = unit.encoding.bom
        if not with_bom.startswith(bom):
            problems.append(f'{bom_file} doesn’t start with the '
                            f'{unit.encoding.value} byte order mark')
        elif bare is not None and with_bom[len(bom):] != bare:
            problems.append(f'{bom_file} doesn’t match {bare_file}')
    return problems


def _prepare_directories(output_root: pathlib.Path, create: bool) -> None:
    directories = encodings.output_directories(output_root)
    if create:
        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as ex:
                raise OutputWriteError(
                    f'can’t create directory {directory}: {ex}') from ex
        return
    missing = [d for d in directories if not d.is_dir()]
    if missing:
        raise MissingDirectoryError(
            'output directories not found: '
            + ', '.join(map(str, missing)))


def _generate_unit(unit: encodings.Unit, validation_dir: pathlib.Path,
                   output_root: pathlib.Path) -> None:
    source = unit.source(validation_dir)
    bare_file = unit.output(output_root)
    bom_file = unit.output(output_root, bom=True)
    _logger.info('converting %s into %s', source, bare_file)
    data = _read_source(unit, source)
    try:
        converted = encodings.transcode(data, unit.encoding)
    except UnicodeError as ex:
        raise ConversionError(
            f'can’t convert {source} to {unit.encoding.value}: {ex}',
            unit) from ex
    _write(unit, bare_file, converted)
    _logger.info('constructing BOM variant %s', bom_file)
    try:
        _write(unit, bom_file, unit.encoding.bom + converted)
    except OutputWriteError:
        # Don’t leave a unit behind with only one of its two fixtures.
        _remove_partial(bare_file)
        raise


def _remove_partial(file: pathlib.Path) -> None:
    try:
        file.unlink(missing_ok=True)
    except OSError as ex:
        _logger.warning('can’t remove partial fixture %s: %s', file, ex)


def _read_source(unit: encodings.Unit, source: pathlib.Path) -> bytes:
    try:
        return source.read_bytes()
    except FileNotFoundError as ex:
        raise SourceFileNotFoundError(
            f'validation document {source} not found', unit) from ex
    except OSError as ex:
        raise SourceReadError(
            f'can’t read validation document {source}: {ex}',
            unit) from ex


def _read_fixture(file: pathlib.Path, problems: list[str]) -> Optional[bytes]:
    try:
        return file.read_bytes()
    except FileNotFoundError:
        problems.append(f'{file} not found')
    except OSError as ex:
        problems.append(f'can’t read {file}: {ex}')
    return None


def _write(unit: encodings.Unit, file: pathlib.Path, data: bytes) -> None:
    try:
        file.write_bytes(data)
    except OSError as ex:
        raise OutputWriteError(f'can’t write {file}: {ex}', unit) from ex


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main function."""
    parser = argparse.ArgumentParser(allow_abbrev=False, description=__doc__)
    parser.add_argument('--validation-dir', type=pathlib.Path,
                        default=pathlib.Path('validation'))
    parser.add_argument('--output-dir', type=pathlib.Path,
                        default=pathlib.Path('.'))
    parser.add_argument('--create-dirs', action='store_true', default=False)
    parser.add_argument('--keep-going', action='store_true', default=False)
    parser.add_argument('--verify', action='store_true', default=False)
    opts = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s %(message)s')
    try:
        if opts.verify:
            problems = verify(opts.validation_dir, opts.output_dir)
            for problem in problems:
                _logger.error('%s', problem)
            if problems:
                sys.exit(1)
        else:
            generate(opts.validation_dir, opts.output_dir,
                     create_dirs=opts.create_dirs, keep_going=opts.keep_going)
    except GenerationError as ex:
        # The per-unit log lines already say which unit failed, so don’t print
        # a stacktrace.
        _logger.error('%s', ex)
        sys.exit(1)


_NUM_UNITS = len(encodings.Encoding) * len(encodings.Variant)

_logger = logging.getLogger('encoding_fixtures.generate')

if __name__ == '__main__':
    main()
