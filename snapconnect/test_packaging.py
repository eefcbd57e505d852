# snapconnect/test_packaging.py
"""
배포 패키지 구성 테스트. api/ 하위 도메인 패키지는 __init__.py가 없는 네임스페이스 패키지입니다.
"""

from pathlib import Path

from setuptools import find_namespace_packages

ROOT = Path(__file__).resolve().parent.parent
BLUEPRINT_PACKAGES = [
    "snapconnect.api.ai", "snapconnect.api.auth", "snapconnect.api.discover", "snapconnect.api.replies",
    "snapconnect.api.snaps", "snapconnect.api.uploads", "snapconnect.api.users",
]


def test_pyproject_enables_namespace_discovery():
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    assert "namespaces = true" in pyproject

def test_blueprint_packages_are_discovered():
    packages = find_namespace_packages(where=str(ROOT), include=["snapconnect*"])
    for name in BLUEPRINT_PACKAGES:
        assert name in packages
