"""
설정 로더

settings.yaml 로드 및 원장 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths

VALID_STORAGES = ("sqlite", "memory")


@dataclass(frozen=True)
class LedgerSettings:
    """원장 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    storage: str
    database_path: Path
    voucher_prefix: str
    default_page_size: int
    web_host: str
    web_port: int
    log_level: str


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _resolve_path(value: Any) -> Path:
    """상대 경로는 프로젝트 루트 기준으로 해석"""
    path = Path(str(value))
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def parse_settings(data: dict[str, Any]) -> LedgerSettings:
    """딕셔너리에서 LedgerSettings 생성

    Raises:
        SettingsLoadError: 값이 유효하지 않은 경우
    """
    storage = str(data.get("storage", Defaults.STORAGE)).lower()
    if storage not in VALID_STORAGES:
        raise SettingsLoadError(
            f"유효하지 않은 storage입니다: '{storage}'. 유효한 값: {list(VALID_STORAGES)}"
        )

    prefix = str(data.get("voucher_prefix", Defaults.VOUCHER_PREFIX)).strip()
    if not prefix.isalnum():
        raise SettingsLoadError(f"voucher_prefix는 영숫자여야 합니다: '{prefix}'")

    try:
        page_size = int(data.get("default_page_size", Defaults.PAGE_SIZE))
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"default_page_size가 정수가 아닙니다: {e}") from e
    if not 1 <= page_size <= Defaults.MAX_PAGE_SIZE:
        raise SettingsLoadError(
            f"default_page_size는 1~{Defaults.MAX_PAGE_SIZE} 범위여야 합니다: {page_size}"
        )

    web_config = data.get("web") or {}
    if not isinstance(web_config, dict):
        raise SettingsLoadError("settings.yaml의 web 섹션 형식이 잘못되었습니다")

    try:
        web_port = int(web_config.get("port", Defaults.WEB_PORT))
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"web.port가 정수가 아닙니다: {e}") from e

    log_level = str(data.get("log_level", Defaults.LOG_LEVEL)).upper()

    return LedgerSettings(
        storage=storage,
        database_path=_resolve_path(data.get("database_path", Paths.LEDGER_DB)),
        voucher_prefix=prefix,
        default_page_size=page_size,
        web_host=str(web_config.get("host", Defaults.WEB_HOST)),
        web_port=web_port,
        log_level=log_level,
    )


def load_settings(path: Path | None = None) -> LedgerSettings:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerSettings 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")

    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    return parse_settings(data)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _settings: LedgerSettings | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._settings is None:
            type(self)._settings = load_settings(settings_path)

    @property
    def ledger(self) -> LedgerSettings:
        """로드된 원장 설정 전체"""
        assert self._settings is not None
        return self._settings

    @property
    def storage(self) -> str:
        """저장소 종류 (sqlite / memory)"""
        return self.ledger.storage

    @property
    def db_path(self) -> Path:
        """SQLite DB 경로"""
        return self.ledger.database_path

    @property
    def voucher_prefix(self) -> str:
        """전표 번호 접두어"""
        return self.ledger.voucher_prefix

    @property
    def default_page_size(self) -> int:
        """기본 페이지 크기"""
        return self.ledger.default_page_size

    @property
    def web_host(self) -> str:
        return self.ledger.web_host

    @property
    def web_port(self) -> int:
        return self.ledger.web_port

    @property
    def log_level(self) -> str:
        return self.ledger.log_level

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._settings = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
