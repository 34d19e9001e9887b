# ucankit

Building blocks for working with UCAN (User Controlled Authorization
Networks) tokens:

- **`ucankit.did`**: `did:key` decentralized identifiers. It parses and
  formats them, turns public keys into DIDs and back, and generates new key
  pairs for Ed25519, RSA (3072 bits), secp256k1 and the NIST curves P-256,
  P-384 and P-521.
- **`ucankit.command`**: UCAN commands such as `/crud/create`. It validates
  them, joins segments and checks whether one command covers another.
- **`ucankit.args`** and **`ucankit.meta`**: ordered key/value collections
  for invocation arguments and token metadata, with read-only views. Argument
  integers must stay within the safe 53-bit range.
- **`ucankit.cid`**: content identifiers (CID v0 and v1). It reads them from
  bytes or strings and rehashes data to check it.
- **`ucankit.car`**: reads and writes CARv1 archives. Every block gets a
  content integrity check.
- **`ucankit.container`**: the `Writer` class, which bundles sealed tokens
  into a DAG-CBOR or CAR container, as raw bytes or as base64 text.
- **`ucankit.didtest`**: fixed test personas (Alice, Bob, Carol, Dan, Erin,
  Frank). Each one has a stable Ed25519 key pair and DID.

## Installation

```
pip install ucankit
```

You need Python 3.10 or newer.

## Decentralized identifiers

```python
from ucankit import did

d = did.parse("did:key:z6Mkod5Jr3yd5SC7UDueqK4dAAw5xYJYjksy722tA9Boxc4z")
print(d)                 # did:key:z6Mkod5Jr3yd5SC7UDueqK4dAAw5xYJYjksy722tA9Boxc4z
print(d.defined())       # True
public_key = d.pub_key()

private_key, identity = did.generate_ed25519()
assert did.from_priv_key(private_key) == identity
assert did.from_pub_key(identity.pub_key()) == identity
```

`did.parse` raises `did.DIDError` when the string is not a valid `did:key`.
That covers a wrong prefix, an encoding other than base58btc, and a key type
other than Ed25519, P-256, secp256k1 or RSA. `did.UNDEF` is the undefined
DID, and its string form is `(undefined)`.

## Commands

```python
from ucankit import command

cmd = command.parse("/crud/create")
print(cmd.segments())                            # ['crud', 'create']
print(command.top().covers(cmd))                 # True
print(command.new("crud").covers(cmd))           # True
print(command.parse("/foo").covers(command.parse("/foo00")))  # False
print(command.top().join("foo", "bar"))          # /foo/bar
print(command.is_valid("/Foo"))                  # False
```

When parsing fails, `command.parse` raises a subclass of
`command.CommandError`: `RequiresLeadingSlashError`,
`DisallowsTrailingSlashError` or `RequiresLowercaseError`.

## Arguments and metadata

```python
from ucankit.args import Args, Builder
from ucankit.meta import Meta

args = Args()
args.add("path", "/tmp/file.txt")
args.add("size", 1234)
for key, value in args.items():
    print(key, value)

built = Builder().add("a", 1).add("b", "two").build()

meta = Meta()
meta.add("note", "hello")
print(meta.get_string("note"))   # hello
```

- Values may be `None`, booleans, integers, floats, strings, bytes, `CID`s,
  and lists or string-keyed mappings of these.
- `add` raises `ValueError` when a key is added twice and `TypeError` for any
  other type of value.
- `Args.add` also rejects integers outside the safe 53-bit range.
- `Builder` collects its errors and raises them when `build()` is called.
- A missing key raises `ArgsNotFoundError` or `MetaNotFoundError`.
- The typed getters of `Meta` (`get_bool`, `get_string`, `get_int`,
  `get_float`, `get_bytes`) raise `TypeError` when the stored value is of
  another kind.
- `read_only()` returns a view. Its `writeable_clone()` returns an
  independent copy.

## Content identifiers

```python
from ucankit.cid import CID

c = CID.from_string("bafzbeigai3eoy2ccc7ybwjfz5r3rdxqrinwi4rwytly24tdbh6yk7zslrm")
assert CID.from_bytes(c.to_bytes()) == c
```

`CID.sum(data)` hashes `data` with the same hash function and digest length
as the CID. The result is the CID that `data` would have. The supported hash
functions are identity, SHA-1, SHA-2 (256, 384, 512), SHA-3 and BLAKE2b-256.
Malformed input raises `CIDError`.

## Containers and CAR files

```python
import hashlib
import io

from ucankit.car import read_car
from ucankit.cid import CID
from ucankit.container import Writer

data = b"sealed token bytes"
token_cid = CID(1, 0x55, bytes([0x12, 32]) + hashlib.sha256(data).digest())

writer = Writer()
writer.add_sealed(token_cid, data)

car_bytes = writer.to_car()
cbor_bytes = writer.to_cbor()
cbor_text = writer.to_cbor_base64()

roots, blocks = read_car(io.BytesIO(car_bytes))
for block in blocks:
    print(block.cid, block.data)
```

- `write_car` writes a CARv1 stream. If no roots are given, it writes
  `EMPTY_CID` as the single root.
- `read_car` returns the roots and a lazy iterator of `CarBlock`s.
- `encode_header` and `decode_header` handle the DAG-CBOR header.
- Malformed data, sections over 32 MiB and blocks whose content does not
  match their CID raise `CarError`.

## What this package does not do

- It does not create, sign, seal or verify delegation or invocation tokens.
- It does not read a container back into tokens. `Writer` only writes
  containers.
- It has no policy language.
- `Meta` does not encrypt values.

## Running the tests

```
pip install "ucankit[test]"
pytest
```