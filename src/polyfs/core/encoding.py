# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.09
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/encoding.py

"""
Character-encoding pipeline.

A Transcoder maps bytes to bytes. There are three kinds of stages:

- the identity transcoder, used when source and target code pages are equal
- fixed table translation between IBM-1047 (EBCDIC) and ISO-8859-1
- codec-backed conversion through Python's codec registry for any other pair

Stages compose left to right with `then()` (or `>>`). Composition flattens
nested pipelines and drops identity stages, so composition is associative
and identity is neutral on both sides.

Transcoders are context managers; leaving the block releases them:
    with transcoder_for("IBM-1047", "UTF-8") as transcoder:
        text = transcoder.encode(data)
"""

import codecs
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from loguru import logger

from polyfs.system.exceptions import (
    EncodingError,
    EncodingNotSupported,
    TranscoderReleaseError,
)


class Transcoder(ABC):
    """A stage converting a byte sequence from one encoding to another."""

    @abstractmethod
    def encode(self, data: bytes) -> bytes:
        raise NotImplementedError("encode() not implemented")

    def release(self) -> None:
        """Dispose resources held by this stage. No-op by default."""
        pass

    @property
    def stages(self) -> tuple["Transcoder", ...]:
        return (self,)

    def then(self, other: "Transcoder") -> "Transcoder":
        """Compose: apply self, then other."""
        return compose(self, other)

    def __rshift__(self, other: "Transcoder") -> "Transcoder":
        return self.then(other)

    def __call__(self, data: bytes) -> bytes:
        return self.encode(data)

    def __enter__(self) -> "Transcoder":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


class IdentityTranscoder(Transcoder):
    """Returns its input unchanged."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def stages(self) -> tuple[Transcoder, ...]:
        return ()

    def encode(self, data: bytes) -> bytes:
        return bytes(data)

    def __repr__(self) -> str:
        return "IDENTITY"


IDENTITY = IdentityTranscoder()


class TableTranscoder(Transcoder):
    """Fixed byte-to-byte translation through a 256-entry table."""

    def __init__(self, table: bytes, name: str):
        if len(table) != 256:
            raise ValueError(f"translation table for {name} must have 256 entries, got {len(table)}")
        self.table = bytes(table)
        self.name = name

    def encode(self, data: bytes) -> bytes:
        return bytes(data).translate(self.table)

    def inverse(self, name: str) -> "TableTranscoder":
        """The table mapping every output byte back to its input byte.

        Only meaningful for bijective tables.
        """
        return TableTranscoder(bytes.maketrans(self.table, bytes(range(256))), name)

    def __repr__(self) -> str:
        return f"<TableTranscoder {self.name}>"


class CodecTranscoder(Transcoder):
    """Conversion through Python's codec registry (decode source, encode target)."""

    def __init__(self, source: str, target: str, errors: str = "strict"):
        # LookupError propagates for unknown names
        self._decoder = codecs.lookup(source)
        self._encoder = codecs.lookup(target)
        self.source = source
        self.target = target
        self.errors = errors
        self._released = False

    def encode(self, data: bytes) -> bytes:
        if self._released:
            raise EncodingError(f"{self!r} is released")
        text, _ = self._decoder.decode(bytes(data), self.errors)
        encoded, _ = self._encoder.encode(text, self.errors)
        return encoded

    def release(self) -> None:
        self._released = True

    def __repr__(self) -> str:
        return f"<CodecTranscoder {self.source} -> {self.target}>"


class TranscoderPipeline(Transcoder):
    """Ordered sequence of stages, applied left to right."""

    def __init__(self, stages: Iterable[Transcoder]):
        self._stages = tuple(stages)

    @property
    def stages(self) -> tuple[Transcoder, ...]:
        return self._stages

    def encode(self, data: bytes) -> bytes:
        for stage in self._stages:
            data = stage.encode(data)
        return data

    def release(self) -> None:
        """Release every stage, in order, even when some of them fail."""
        errors = []
        for stage in self._stages:
            try:
                stage.release()
            except Exception as e:
                logger.debug(f"Releasing {stage!r} failed: {e}")
                errors.append(e)
        if errors:
            raise TranscoderReleaseError(errors)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TranscoderPipeline):
            return NotImplemented
        return self._stages == other._stages

    def __hash__(self) -> int:
        return hash(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    def __repr__(self) -> str:
        return f"<TranscoderPipeline {' >> '.join(repr(stage) for stage in self._stages)}>"


def compose(*transcoders: Transcoder) -> Transcoder:
    """Flatten transcoders into one stage sequence, dropping identity stages."""
    stages = [stage for transcoder in transcoders for stage in transcoder.stages]
    if not stages:
        return IDENTITY
    if len(stages) == 1:
        return stages[0]
    return TranscoderPipeline(stages)


# IBM-1047 byte -> ISO-8859-1 byte
IBM1047_TO_LATIN1 = TableTranscoder(bytes.fromhex(
    "000102039c09867f978d8e0b0c0d0e0f101112139d8508871819928f1c1d1e1f"
    "80818283840a171b88898a8b8c050607909116939495960498999a9b14159e1a"
    "20a0e2e4e0e1e3e5e7f1a22e3c282b7c26e9eaebe8edeeefecdf21242a293b5e"
    "2d2fc2c4c0c1c3c5c7d1a62c255f3e3ff8c9cacbc8cdcecfcc603a2340273d22"
    "d8616263646566676869abbbf0fdfeb1b06a6b6c6d6e6f707172aabae6b8c6a4"
    "b57e737475767778797aa1bfd05bdeaeaca3a5b7a9a7b6bcbdbedda8af5db4d7"
    "7b414243444546474849adf4f6f2f3f57d4a4b4c4d4e4f505152b9fbfcf9faff"
    "5cf7535455565758595ab2d4d6d2d3d530313233343536373839b3dbdcd9da9f"
), "IBM-1047 -> ISO-8859-1")

LATIN1_TO_IBM1047 = IBM1047_TO_LATIN1.inverse("ISO-8859-1 -> IBM-1047")

_IBM1047 = "ibm-1047"
_LATIN1 = "iso8859-1"
_IBM1047_ALIASES = {"ibm-1047", "ibm1047", "cp1047", "1047", "ebcdic-1047"}


def normalize_encoding(name: str) -> str:
    """Canonical code page name: IBM-1047 aliases collapse, others go through the codec registry."""
    lowered = name.strip().lower().replace("_", "-")
    if lowered in _IBM1047_ALIASES:
        return _IBM1047
    try:
        return codecs.lookup(lowered).name
    except LookupError:
        return lowered


def transcoder_for(source: str, target: str) -> Transcoder:
    """Build the transcoder converting from source to target encoding.

    Raises EncodingNotSupported when neither name can be resolved.
    """
    source_name = normalize_encoding(source)
    target_name = normalize_encoding(target)

    if source_name == target_name:
        return IDENTITY
    if (source_name, target_name) == (_IBM1047, _LATIN1):
        return IBM1047_TO_LATIN1
    if (source_name, target_name) == (_LATIN1, _IBM1047):
        return LATIN1_TO_IBM1047

    try:
        return CodecTranscoder(source, target)
    except LookupError:
        pass

    # The codec registry has no IBM-1047; go through ISO-8859-1
    try:
        if source_name == _IBM1047:
            return compose(IBM1047_TO_LATIN1, transcoder_for(_LATIN1, target))
        if target_name == _IBM1047:
            return compose(transcoder_for(source, _LATIN1), LATIN1_TO_IBM1047)
    except EncodingNotSupported:
        pass
    raise EncodingNotSupported(source, target)


def transcode(source: str, target: str, data: bytes) -> bytes:
    """One-shot conversion of data from source to target encoding."""
    transcoder = transcoder_for(source, target)
    try:
        return transcoder.encode(data)
    finally:
        transcoder.release()
