import secrets, string

_ALPH = string.ascii_lowercase + string.digits

def short_slug(n: int = 12) -> str:
    # avoid confusing chars
    safe = _ALPH.replace('l','').replace('1','').replace('0','').replace('o','')
    return "".join(secrets.choice(safe) for _ in range(n))
