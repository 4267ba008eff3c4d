# tools/provision_user.py — client du bot : crée un compte via POST /api/add-user
# Usage :
#   BOT_API_SECRET=... python tools/provision_user.py http://127.0.0.1:5000 alice 'mot-de-passe'
import os, sys

import requests

DEFAULT_HEADER = "X-Bot-Secret"


def provision_user(base_url: str, secret: str, username: str, password: str,
                   header: str = DEFAULT_HEADER, timeout: float = 10):
    """Renvoie (status_code, payload JSON). Lève requests.RequestException si le serveur est injoignable."""
    r = requests.post(
        f"{base_url.rstrip('/')}/api/add-user",
        json={"username": username, "password": password},
        headers={header: secret},
        timeout=timeout,
    )
    try:
        payload = r.json()
    except ValueError:
        payload = {"ok": False, "error": "bad_response", "message": r.text[:200]}
    return r.status_code, payload


def main(argv: list[str]) -> int:
    if len(argv) != 3:
        print("usage: provision_user.py BASE_URL USERNAME PASSWORD")
        return 2
    secret = os.environ.get("BOT_API_SECRET")
    if not secret:
        print("ERROR: set BOT_API_SECRET")
        return 2
    header = os.environ.get("BOT_API_HEADER", DEFAULT_HEADER)
    try:
        status, payload = provision_user(argv[0], secret, argv[1], argv[2], header=header)
    except requests.RequestException as e:
        print(f"ERROR: {e}")
        return 1
    if payload.get("ok"):
        print(f"created {payload['username']} id={payload['id']}")
        return 0
    print(f"FAILED ({status}): {payload.get('error')} {payload.get('message', '')}".rstrip())
    return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
