import string
from typing import List, Literal, TypeAlias, Union

from xor_sleuth.models.byte_sequence import ByteSequence, DecodingError, TextEncoding

CiphertextFormat: TypeAlias = Union[Literal[
    "b64",
    "hex",
], str]

CIPHERTEXT_ENCODINGS = {
    "b64": TextEncoding.BASE64,
    "hex": TextEncoding.HEX,
}

B64_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"


def parse_ciphertext(text: str, format: CiphertextFormat) -> ByteSequence:
    """Decode one ciphertext string. The result renders as ASCII."""
    encoding = CIPHERTEXT_ENCODINGS.get(format)
    if encoding is None:
        raise ValueError(f"Invalid ciphertext format: {format}")
    return ByteSequence.from_text(text, encoding).with_encoding(TextEncoding.ASCII)


def load_ciphertext_lines(file_path: str, format: CiphertextFormat) -> List[ByteSequence]:
    """Load line-delimited ciphertexts from a file, skipping blank lines."""
    if format not in CIPHERTEXT_ENCODINGS:
        raise ValueError(f"Invalid ciphertext format: {format}")
    # latin-1 maps every byte to a character; stray bytes then fail decoding per line
    with open(file_path, "r", encoding="latin-1") as f:
        lines = [line.strip() for line in f]
    return [parse_ciphertext(line, format) for line in lines if line]


def hex_to_base64(hex_string: str) -> str:
    """
    Regroup hex digits into base64 digits, reading the hex string as one
    number: every 3 hex digits (12 bits) become 2 base64 digits. Groups are
    aligned from the right, so a short leading group is zero-extended and
    any digit count is accepted. The output is never padded.
    """
    hex_string = hex_string.strip()
    bad = next((c for c in hex_string if c not in string.hexdigits), None)
    if bad is not None:
        raise DecodingError(f"Invalid hex text: non-hexadecimal digit {bad!r}")

    head = len(hex_string) % 3 or 3
    groups = [hex_string[:head]] + [hex_string[i:i + 3] for i in range(head, len(hex_string), 3)]

    out = []
    for group in groups:
        if not group:
            continue
        value = int(group, 16)
        out.append(B64_ALPHABET[value // 64])
        out.append(B64_ALPHABET[value % 64])
    return "".join(out)
