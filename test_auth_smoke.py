"""
Live smoke test — drives the full session lifecycle against a running
server (``python manage.py runserver`` with real Cloudinary credentials).

Tests:
  1. Registration — validation, avatar requirement, success, conflict
  2. Login — unknown user, wrong password, success + cookies
  3. Refresh — rotation, reuse of a superseded token
  4. Logout — stored token cleared, old token rejected

Cookies are marked Secure, so this script passes tokens explicitly
instead of relying on the session's cookie jar over plain HTTP.
"""

import base64
import io
import os
import requests
import sys
import time

BASE = os.environ.get("SMOKE_BASE_URL", "http://localhost:8000/api/v1")
USERS = f"{BASE}/users"
TS = str(int(time.time()))
passed = 0
failed = 0

# Smallest valid PNG (1x1 transparent pixel)
PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def check(label, condition, detail=""):
    global passed, failed
    if condition:
        passed += 1
        print(f"  PASS  {label}")
    else:
        failed += 1
        print(f"  FAIL  {label} — {detail}")


def main():
    global passed, failed

    username = f"smoke_{TS}"
    form = {
        "fullName": "Smoke Test",
        "username": username,
        "email": f"{username}@example.com",
        "password": "SmokePass!99",
    }

    # ---------------------------------------------------------------
    print("\n=== REGISTRATION ===")
    # ---------------------------------------------------------------
    r = requests.post(f"{USERS}/register/", data={**form, "fullName": "  "},
                      files={"avatar": ("a.png", io.BytesIO(PNG), "image/png")})
    check("Blank field → 400", r.status_code == 400, f"{r.status_code}")

    r = requests.post(f"{USERS}/register/", data=form)
    check("No avatar → 400", r.status_code == 400, f"{r.status_code}")

    r = requests.post(f"{USERS}/register/", data=form,
                      files={"avatar": ("a.png", io.BytesIO(PNG), "image/png")})
    check("Register → 201", r.status_code == 201, f"{r.status_code} {r.text[:200]}")
    user = r.json().get("data") or {}
    check("No password in response", "password" not in user, user)
    check("Cover image empty", user.get("coverImage") == "", user)

    r = requests.post(f"{USERS}/register/", data=form,
                      files={"avatar": ("a.png", io.BytesIO(PNG), "image/png")})
    check("Duplicate → 409", r.status_code == 409, f"{r.status_code}")

    # ---------------------------------------------------------------
    print("\n=== LOGIN ===")
    # ---------------------------------------------------------------
    r = requests.post(f"{USERS}/login/", json={"username": "ghost", "password": "x"})
    check("Unknown user → 404", r.status_code == 404, f"{r.status_code}")

    r = requests.post(f"{USERS}/login/", json={"username": username, "password": "wrong"})
    check("Wrong password → 401", r.status_code == 401, f"{r.status_code}")

    r = requests.post(f"{USERS}/login/", json={"email": form["email"], "password": form["password"]})
    check("Login → 200", r.status_code == 200, f"{r.status_code}")
    original = r.json()["data"]
    check("Access cookie set", "accessToken" in r.cookies or "accessToken" in r.headers.get("Set-Cookie", ""))
    check("Distinct tokens", original["accessToken"] != original["refreshToken"])

    # ---------------------------------------------------------------
    print("\n=== REFRESH ===")
    # ---------------------------------------------------------------
    r = requests.post(f"{USERS}/refresh-token/", json={"refreshToken": original["refreshToken"]})
    check("Refresh → 200", r.status_code == 200, f"{r.status_code}")
    rotated = r.json()["data"]
    check("New refresh token", rotated["refreshToken"] != original["refreshToken"])
    check("New access token", rotated["accessToken"] != original["accessToken"])

    r = requests.post(f"{USERS}/refresh-token/", json={"refreshToken": original["refreshToken"]})
    check("Reused token → 401", r.status_code == 401, f"{r.status_code}")

    r = requests.post(f"{USERS}/refresh-token/", json={"refreshToken": "not.a.token"})
    check("Garbage token → 401", r.status_code == 401, f"{r.status_code}")

    # ---------------------------------------------------------------
    print("\n=== LOGOUT ===")
    # ---------------------------------------------------------------
    r = requests.post(f"{USERS}/logout/")
    check("Logout without token → 401", r.status_code == 401, f"{r.status_code}")

    r = requests.post(f"{USERS}/logout/",
                      headers={"Authorization": f"Bearer {rotated['accessToken']}"})
    check("Logout → 200", r.status_code == 200, f"{r.status_code}")

    r = requests.post(f"{USERS}/refresh-token/", json={"refreshToken": rotated["refreshToken"]})
    check("Refresh after logout → 401", r.status_code == 401, f"{r.status_code}")

    # ==================================================================
    print(f"\n{'='*50}")
    print(f"Results: {passed} passed, {failed} failed out of {passed + failed}")
    if failed:
        print("SOME TESTS FAILED")
        sys.exit(1)
    else:
        print("ALL TESTS PASSED")


if __name__ == "__main__":
    main()
