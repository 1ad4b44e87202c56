from app.services.school_api import SchoolAPIService


def get_school_api() -> SchoolAPIService:
    return SchoolAPIService()
