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

"""Encodings, document variants, and the file layout of the XML fixtures.

The validation directory holds one canonical UTF-8 document per encoding and
variant.  Each of them gets re-encoded into a bare fixture and a fixture
prefixed with a byte order mark."""

from collections.abc import Iterator
import dataclasses
import enum
import pathlib

class Encoding(enum.Enum):
    """A target encoding; the value is its name in the file layout."""

    UTF8 = 'utf8'
    UTF16LE = 'utf16le'
    UTF16BE = 'utf16be'

    @property
    def codec(self) -> str:
        """The Python codec name.  None of these codecs write a BOM."""
        return _CODECS[self]

    @property
    def bom(self) -> bytes:
        """The byte order mark for this encoding."""
        return _BOMS[self]


class Variant(enum.Enum):
    """The structural flavor of a fixture document."""

    PLAIN = ''
    XMLDECL = '_xmldecl'
    XMLDECL_ENCODINGDECL = '_xmldecl_encodingdecl'

    @property
    def suffix(self) -> str:
        """Filename suffix, empty for plain documents."""
        return self.value


@dataclasses.dataclass(frozen=True)
class Unit:
    """One encoding and variant pair, producing two fixture files."""

    encoding: Encoding
    variant: Variant

    def source(self, validation_dir: pathlib.Path) -> pathlib.Path:
        """Returns the canonical UTF-8 document for this unit."""
        name = self.encoding.value + self.variant.suffix
        return validation_dir / f'{name}.xml'

    def output(self, output_root: pathlib.Path, *,
               bom: bool = False) -> pathlib.Path:
        """Returns the fixture file for this unit, with or without BOM."""
        return (_directory(output_root, self.encoding, bom)
                / f'doc{self.variant.suffix}.xml')

    def __str__(self) -> str:
        return self.encoding.value + (self.variant.suffix or '_plain')


def units() -> Iterator[Unit]:
    """Yields all units, encodings first, then variants."""
    for encoding in Encoding:
        for variant in Variant:
            yield Unit(encoding, variant)


def output_directories(output_root: pathlib.Path) -> list[pathlib.Path]:
    """Returns the six directories that receive fixture files."""
    return [_directory(output_root, encoding, bom)
            for encoding in Encoding for bom in (False, True)]


def transcode(data: bytes, encoding: Encoding) -> bytes:
    """Re-encodes UTF-8 data into the given encoding.

    Raises:
      UnicodeError if data isn’t valid UTF-8 or contains characters that the
      target encoding can’t represent
    """
    text = data.decode('utf-8', errors='strict')
    return text.encode(encoding.codec, errors='strict')


def _directory(output_root: pathlib.Path, encoding: Encoding,
               bom: bool) -> pathlib.Path:
    return output_root / (encoding.value + ('_bom' if bom else ''))


_CODECS = {
    Encoding.UTF8: 'utf-8',
    Encoding.UTF16LE: 'utf-16-le',
    Encoding.UTF16BE: 'utf-16-be',
}

_BOMS = {
    Encoding.UTF8: b'\xEF\xBB\xBF',
    Encoding.UTF16LE: b'\xFF\xFE',
    Encoding.UTF16BE: b'\xFE\xFF',
}
