"""비즈니스 로직 서비스 패키지.

Business logic service layer. Services validate, call repositories,
and raise ``mms.utils.exceptions`` errors; routers own the commit.
"""
