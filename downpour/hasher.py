import hashlib




def toSHA1(bchars: bytes) -> bytes:
    '''Return the sha1 digest of the given bytes.'''
    if isinstance(bchars, (bytes, bytearray, memoryview)):
        hasher = hashlib.sha1()
        hasher.update(bchars)
        return hasher.digest()
    else:
        raise TypeError(f"Expect bytes, not {type(bchars)}.")
