"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- vouchers: 전표 생성/수정/삭제/조회
- heads: 계정 과목 관리, 잔액
- parties: 거래처 관리
- reports: 일일 보고서
"""
