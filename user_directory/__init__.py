"""사용자 디렉터리 — 사용자, 조직 및 프로필 데이터 접근 계층.

User directory — data-access layer for users, organizations and profiles of
a multi-tenant scheduling application.
"""
