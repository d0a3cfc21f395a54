ALEPH_BET = 'אבגדהוזחטיכלמנסעפצקרשת'
_ATBASH = str.maketrans(ALEPH_BET, ALEPH_BET[::-1])


def atbash_encode(text):
    """Swap each Hebrew letter with its mirror (א<->ת, ב<->ש, ...). Anything else passes through."""
    return text.translate(_ATBASH)


def atbash_decode(text):
    # Atbash is its own inverse
    return atbash_encode(text)
