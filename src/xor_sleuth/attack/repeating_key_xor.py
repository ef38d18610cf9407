from xor_sleuth.models.byte_sequence import ByteSequence


def encrypt_repeating_key_xor(message: ByteSequence, key: ByteSequence) -> ByteSequence:
    """ XOR the message against the key repeated to the message length. """
    return message ^ ByteSequence.cycle(key, len(message))
