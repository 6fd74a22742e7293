"""로깅 설정: 앱 기동 시 1회 호출."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("labsupply_backend").setLevel(numeric)
    # httpx 요청 로그는 polling 주기마다 찍히므로 한 단계 낮춤
    logging.getLogger("httpx").setLevel(max(numeric, logging.WARNING))
