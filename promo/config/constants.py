"""Configuration constants for meeting-promo."""

# Organization personas, selected by meeting type
ORGANIZATIONS = {
    "SLUUG": {
        "name": "St. Louis Linux and Unix Users Group",
        "short_name": "SLUUG",
        "description": (
            "The Stl Linux Unix Users Group (SLUUG) is a not-for-profit professional association dedicated to "
            "education and communication among computer users. SLUUG members include many Linux and Unix "
            "professionals, Networking experts, System experts, hobbyists, and students. Also, many who are "
            "interested in Unix, Unix-like Operating Systems, Linux, BSD and other Free Open Source Software (FOSS) "
            "applications, products, projects and services. Its purpose is to provide a forum for exchanging "
            "information about open systems, products, services and architectures.\n"
            "The Stl Linux Unix Users Group have met continuously since we incorporated in July 1992. All of our "
            "meetings are virtual, free, and open to the public."
        ),
        "handles": {
            "Twitter": "@SLUUG_Org",
            "YouTube": "@SluugOrg",
            "Meetup": "saint-louis-unix-users-group",
        },
    },
    "STLLUG": {
        "name": "St. Louis Linux Users Group",
        "short_name": "STLLUG",
        "description": (
            "The St. Louis Linux Users Group (STLLUG) is a special interest group of SLUUG focused on Linux "
            "for everyone from newcomers to seasoned administrators. STLLUG meetings usually feature a single "
            "presentation followed by open discussion and help with Linux questions. All of our meetings are "
            "virtual, free, and open to the public."
        ),
        "handles": {
            "Twitter": "@SLUUG_Org",
            "YouTube": "@SluugOrg",
            "Meetup": "saint-louis-unix-users-group",
        },
    },
}

# Default configuration values; a user YAML file is deep-merged over these
DEFAULT_CONFIG = {
    "llm": {
        "api_key_env": "OPENAI_API_KEY",
        "base_url": None,
        "text_model": "gpt-4o",
        "image_model": "dall-e-3",
        "image_size": "1792x1024",
        "temperature": 1.0,
        "max_tokens": 256,
        "design_max_tokens": 768,
        "timeout": 120,
    },
    "prompts": {
        "file": None,
    },
    "images": {
        "width": 1280,
        "height": 720,
        "max_bytes": 2 * 1024 * 1024,
        "base_quality": 80,
        "min_quality": 10,
        "filename_chars": 60,
    },
    "download": {
        "timeout": 60,
        "retries": 3,
    },
    "links": {
        # TODO: set once the SLUUG/STLLUG sites move off their placeholder URLs
        "fallback": {},
    },
    "titles": {
        "format": "{title} | {meeting_type} {meeting_date}",
    },
    "pipeline": {
        "max_workers": 8,
    },
    "output": {
        "dir": "out",
    },
    "input": {
        "templates_dir": "templates",
    },
}
