from enum import Enum

class Category(str, Enum):
    CGPA = "cgpa"
    INTERNSHIPS = "internships"
    PROJECTS = "projects"
    HACKATHONS = "hackathons"
    RESEARCH = "research"
    ENTREPRENEURSHIP = "entrepreneurship"
    CERTIFICATIONS = "certifications"
    COMPETITIVE_EXAMS = "competitiveExams"
    SPORTS_OR_CULTURAL = "sportsOrCultural"
    VOLUNTEERING = "volunteering"
    SCHOLARSHIPS = "scholarships"
    CLUB_ACTIVITIES = "clubActivities"
    DEPARTMENT_CONTRIBUTIONS = "departmentContributions"
    REFERENCES = "references"

class IndexStatus(str, Enum):
    SCOPUS = "scopus"
    SCI = "sci"
    UGC = "ugc"
    OTHER = "other"
    NONE = "none"

class PublicationStatus(str, Enum):
    FILED = "filed"
    PUBLISHED = "published"
    GRANTED = "granted"
    UNDER_REVIEW = "under_review"

class EventLevel(str, Enum):
    ZONE = "zone"
    DISTRICT = "district"
    STATE = "state"
    NATIONAL = "national"
    INTERNATIONAL = "international"

