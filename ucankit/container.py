"""A container that aggregates sealed tokens and serializes them together."""

from __future__ import annotations

import base64
import io
from typing import BinaryIO

import cbor2

from ucankit.car import CarBlock, write_car
from ucankit.cid import CID

CONTAINER_VERSION = "ctn-v1"


class Writer(dict):
    """Sealed tokens keyed by their CID, ready to be serialized."""

    def add_sealed(self, cid: CID, data: bytes) -> None:
        """Include a sealed token in the container."""
        self[cid] = bytes(data)

    def to_cbor(self) -> bytes:
        """Encode the container as DAG-CBOR."""
        return cbor2.dumps({CONTAINER_VERSION: list(self.values())})

    def to_cbor_writer(self, stream: BinaryIO) -> None:
        """Write the DAG-CBOR encoding to ``stream``."""
        stream.write(self.to_cbor())

    def to_cbor_base64(self) -> str:
        """Encode the container as base64 DAG-CBOR."""
        return base64.b64encode(self.to_cbor()).decode("ascii")

    def to_cbor_base64_writer(self, stream: BinaryIO) -> None:
        """Write the base64 DAG-CBOR encoding to ``stream``."""
        stream.write(base64.b64encode(self.to_cbor()))

    def to_car(self) -> bytes:
        """Encode the container as a CAR file."""
        buf = io.BytesIO()
        self.to_car_writer(buf)
        return buf.getvalue()

    def to_car_writer(self, stream: BinaryIO) -> None:
        """Write the CAR encoding to ``stream``."""
        write_car(stream, [], (CarBlock(cid, data) for cid, data in self.items()))

    def to_car_base64(self) -> str:
        """Encode the container as a base64 CAR file."""
        return base64.b64encode(self.to_car()).decode("ascii")

    def to_car_base64_writer(self, stream: BinaryIO) -> None:
        """Write the base64 CAR encoding to ``stream``."""
        stream.write(base64.b64encode(self.to_car()))