import os
import sys
import json
import subprocess
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]

VALID_SECURITY_TXT = """\
# Our security address
Contact: mailto:security@example.com
Contact: https://example.com/security-contact
Expires: Thu, 31 Dec 2026 23:59:59 +0000
Encryption: https://example.com/pgp-key.txt
Preferred-Languages:en,fr
Canonical: https://example.com/.well-known/security.txt
Policy: https://example.com/security-policy.html
X-Internal-Team: AppSec
"""

BROKEN_SECURITY_TXT = """\
Contact: not a url
Expires: 2026-12-31T23:59:59Z

no separator here
Preferred-Languages: en
# trailing note
"""


def run_cli(args, cwd=None, env=None, timeout=60):
    """
    Run the CLI as a subprocess: python -m securitytxt.cli <args>
    Returns CompletedProcess with stdout/stderr text captured.
    """
    cmd = [sys.executable, "-m", "securitytxt.cli"] + list(map(str, args))
    env = dict(env or os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(cmd, cwd=cwd or REPO_ROOT, env=env, capture_output=True, text=True, timeout=timeout)


@pytest.fixture()
def dataset_dir(tmp_path: Path) -> Path:
    """
    Build a small tree of security.txt files and return its root.
    """
    root = tmp_path / "dataset"
    good = root / "good.example" / ".well-known"
    good.mkdir(parents=True)
    (good / "security.txt").write_text(VALID_SECURITY_TXT)
    bad = root / "bad.example"
    bad.mkdir(parents=True)
    (bad / "security.txt").write_text(BROKEN_SECURITY_TXT)
    skipped = root / "node_modules" / "pkg"
    skipped.mkdir(parents=True)
    (skipped / "security.txt").write_text("broken line\n")
    (root / "README.md").write_text("Contact: nothing to see\n")
    return root


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d


def load_json(p: Path):
    with p.open("r") as f:
        return json.load(f)


def assert_exit(proc, code):
    assert proc.returncode == code, f"Unexpected exit {proc.returncode}:\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}"


def assert_file(p: Path):
    assert p.exists(), f"Expected file missing: {p}"
    return p

