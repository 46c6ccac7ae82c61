import uvicorn

from .settings import settings


def main() -> None:
	uvicorn.run("syllaboard.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
	main()
