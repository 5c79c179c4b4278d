from __future__ import annotations

from mentor_finder.contracts.mentor_search import MentorFilter, Profile

_US_LOCATIONS = (
    "California",
    "New York",
    "Texas",
    "Illinois",
    "Washington",
    "Bay Area",
    ", CA",
    ", NY",
    ", TX",
    ", IL",
    ", WA",
)

COUNTRY_ALIASES: dict[str, tuple[str, ...]] = {
    "united states": _US_LOCATIONS,
    "us": _US_LOCATIONS,
    "usa": _US_LOCATIONS,
}

DEMO_PROFILES: tuple[Profile, ...] = (
    Profile(
        id="sarah-chen-pm",
        name="Sarah Chen",
        headline="Senior Product Manager at Google | Ex-Meta | Stanford MBA",
        company="Google",
        location="San Francisco Bay Area",
        industry="Technology",
        skills=["Product Strategy", "Data Analytics", "User Research", "A/B Testing", "SQL", "Figma"],
        summary=(
            "Leading product initiatives for Google Cloud Platform. Previously built consumer products at Meta "
            "reaching 100M+ users. Passionate about AI/ML applications in productivity tools."
        ),
        linkedin_url="https://linkedin.com/in/sarah-chen-pm",
        source="Demo",
    ),
    Profile(
        id="michael-rodriguez-swe",
        name="Michael Rodriguez",
        headline="Staff Software Engineer at Netflix | Distributed Systems Expert",
        company="Netflix",
        location="Los Gatos, California",
        industry="Technology",
        skills=["Java", "Python", "Kubernetes", "Microservices", "System Design", "AWS"],
        summary=(
            "Building scalable streaming infrastructure serving 200M+ subscribers globally. Open source "
            "contributor to Apache Kafka. Mentor to 50+ junior engineers."
        ),
        linkedin_url="https://linkedin.com/in/michael-rodriguez-swe",
        source="Demo",
    ),
    Profile(
        id="emily-wang-marketing",
        name="Emily Wang",
        headline="VP of Marketing at Stripe | Growth & Brand Strategy Leader",
        company="Stripe",
        location="New York, New York",
        industry="Marketing",
        skills=["Growth Marketing", "Brand Strategy", "Performance Marketing", "Analytics", "SQL", "Looker"],
        summary=(
            "Scaled Stripe's marketing from $100M to $1B+ ARR. Expert in B2B SaaS growth, brand positioning, "
            "and data-driven marketing. Former consultant at McKinsey."
        ),
        linkedin_url="https://linkedin.com/in/emily-wang-marketing",
        source="Demo",
    ),
    Profile(
        id="james-kim-founder",
        name="James Kim",
        headline="Co-Founder & CEO at TechStart (YC W20) | 2x Exit | Angel Investor",
        company="TechStart",
        location="Austin, Texas",
        industry="Technology",
        skills=[
            "Entrepreneurship",
            "Fundraising",
            "Product Development",
            "Team Building",
            "Strategic Planning",
            "Venture Capital",
        ],
        summary=(
            "Serial entrepreneur with 2 successful exits ($50M+ total). Angel investor in 30+ startups. "
            "Raised $25M+ across multiple ventures. Y Combinator alum."
        ),
        linkedin_url="https://linkedin.com/in/james-kim-founder",
        source="Demo",
    ),
    Profile(
        id="lisa-thompson-consulting",
        name="Lisa Thompson",
        headline="Principal at McKinsey & Company | Healthcare & Digital Transformation",
        company="McKinsey & Company",
        location="Chicago, Illinois",
        industry="Consulting",
        skills=[
            "Strategy Consulting",
            "Digital Transformation",
            "Healthcare",
            "Change Management",
            "Data Analytics",
            "Leadership",
        ],
        summary=(
            "Leading digital transformation initiatives for Fortune 500 healthcare companies. 12+ years at "
            "McKinsey serving C-suite executives. Harvard Business School MBA."
        ),
        linkedin_url="https://linkedin.com/in/lisa-thompson-consulting",
        source="Demo",
    ),
    Profile(
        id="david-patel-finance",
        name="David Patel",
        headline="VP, Investment Banking at Goldman Sachs | Tech M&A Specialist",
        company="Goldman Sachs",
        location="New York, New York",
        industry="Finance",
        skills=[
            "Investment Banking",
            "M&A",
            "Financial Modeling",
            "Valuation",
            "Due Diligence",
            "Client Management",
        ],
        summary=(
            "Leading M&A transactions for tech companies ($100M - $10B+). Advised on 50+ deals including IPOs "
            "and strategic acquisitions. Wharton MBA, CFA charterholder."
        ),
        linkedin_url="https://linkedin.com/in/david-patel-finance",
        source="Demo",
    ),
    Profile(
        id="lisa-wang-ux",
        name="Lisa Wang",
        headline="UX Design Lead at Meta",
        company="Meta",
        location="Menlo Park, CA",
        industry="Technology",
        skills=["User Experience", "Design Systems", "Prototyping", "User Research", "Product Design"],
        summary="Creating intuitive experiences for billions of users across Facebook products.",
        linkedin_url="https://linkedin.com/in/lisa-wang-ux",
        source="Demo",
    ),
    Profile(
        id="james-thompson-data",
        name="James Thompson",
        headline="Data Science Director at Netflix",
        company="Netflix",
        location="Los Gatos, CA",
        industry="Technology",
        skills=["Machine Learning", "Data Science", "Python", "Statistics", "A/B Testing"],
        summary="Leading personalization algorithms that power content recommendations.",
        linkedin_url="https://linkedin.com/in/james-thompson-data",
        source="Demo",
    ),
    Profile(
        id="michael-rodriguez-azure",
        name="Michael Rodriguez",
        headline="Software Engineering Manager at Microsoft",
        company="Microsoft",
        location="Seattle, WA",
        industry="Technology",
        skills=["Software Architecture", "Team Management", "Cloud Computing", ".NET", "Azure"],
        summary="Building scalable systems and leading engineering teams at Microsoft Azure.",
        linkedin_url="https://linkedin.com/in/michael-rodriguez-azure",
        source="Demo",
    ),
)


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def matches_filter(profile: Profile, mentor_filter: MentorFilter) -> bool:
    """True when the profile satisfies every supplied filter field."""
    if mentor_filter.industry and not _contains(profile.industry, mentor_filter.industry):
        return False
    if mentor_filter.role and not (
        _contains(profile.headline, mentor_filter.role)
        or any(_contains(skill, mentor_filter.role) for skill in profile.skills)
    ):
        return False
    if mentor_filter.country:
        locations = COUNTRY_ALIASES.get(mentor_filter.country.lower(), (mentor_filter.country,))
        if not any(_contains(profile.location, location) for location in locations):
            return False
    if mentor_filter.company and not _contains(profile.company, mentor_filter.company):
        return False
    if mentor_filter.college and not (
        _contains(profile.headline, mentor_filter.college) or _contains(profile.summary, mentor_filter.college)
    ):
        return False
    return True


def demo_profiles(mentor_filter: MentorFilter | None = None) -> list[Profile]:
    if mentor_filter is None or mentor_filter.is_empty():
        return list(DEMO_PROFILES)
    return [profile for profile in DEMO_PROFILES if matches_filter(profile, mentor_filter)]
