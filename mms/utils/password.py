"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing helpers built on bcrypt.
Account passwords are only ever persisted as bcrypt hashes.
"""

import bcrypt


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Args:
        password: 평문 비밀번호 (Plain text password)

    Returns:
        str: 솔트가 포함된 bcrypt 해시 (Salted bcrypt hash string)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """로그인 시 입력된 비밀번호가 저장된 해시와 일치하는지 확인합니다."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
