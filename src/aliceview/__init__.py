"""ALICE-View — unified API
Install once, import one namespace:

    pip install -e .

Usage:

    import aliceview as av
    f = av.ContainerBuilder.julia(256, -0.7, 0.27).build()
    av.write_alice("julia.alice", f)

    dec = av.Decoder()
    dec.load("julia.alice")
    dec.content            # FractalContent(...)

Or detailed modules:

    from aliceview import codec, wf, proc
"""

__version__ = "0.1.0"

import alicecodec as codec
import alicewf as wf
import aliceproc as proc

from alicecodec import (
    AliceError, AliceFile, ContainerBuilder, ContentType, Header, Metadata,
    LinearPayload, PerlinPayload, FractalPayload, FractalKind,
    read_alice, write_alice,
)
from alicewf import Decoder, DecoderConfig, DecodedKind
from alicewf.preview import render_preview

__all__ = [
    # sub-namespaces
    "codec", "wf", "proc",
    # convenience
    "AliceError", "AliceFile", "ContainerBuilder", "ContentType", "Header", "Metadata",
    "LinearPayload", "PerlinPayload", "FractalPayload", "FractalKind",
    "read_alice", "write_alice",
    "Decoder", "DecoderConfig", "DecodedKind",
    "render_preview",
    "__version__",
]
