import os
import yaml
from pathlib import Path
from dotenv import load_dotenv

class Config:
    def __init__(self):
        # Load appropriate .env file based on environment
        self.env = os.getenv("IDEAROULETTE_ENV", "dev")
        self._load_env_file()

        self.categories_file_name = os.getenv("CATEGORIES_FILE", "categories.yaml")

        # Project paths
        self.project_root = Path(__file__).parent.parent.parent
        self.categories_file = self.project_root / self.categories_file_name

        # Generation provider ("gemini" or "openai")
        self.ai_provider = os.getenv("AI_PROVIDER", "gemini")

        # Google AI settings
        self.google_ai_api_key = os.getenv("GOOGLE_AI_API_KEY")
        self.google_ai_model = os.getenv("GOOGLE_AI_MODEL", "gemini-2.5-flash")

        # OpenAI settings
        self.openai_api_key = os.getenv("OPENAI_API_KEY")
        self.openai_model = os.getenv("OPENAI_MODEL", "gpt-4o")

        # MongoDB settings
        self.mongo_uri = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_db_name = os.getenv("MONGO_DB_NAME", "idearoulette")

        # Logging settings
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        # Feed settings
        self.prefetch_threshold = int(os.getenv("PREFETCH_THRESHOLD", 15))
        self.batch_size = int(os.getenv("BATCH_SIZE", 15))
        self.initial_batch_size = int(os.getenv("INITIAL_BATCH_SIZE", 30))
        self.remix_full_ideas = os.getenv("REMIX_FULL_IDEAS", "true").lower() in ("1", "true", "yes")

        # Load category catalog from YAML
        self.categories = self._load_categories()

    def _load_env_file(self):
        """Load the appropriate .env file based on the environment."""
        env_file = ".env"

        # Check for environment-specific .env file
        if self.env != "dev":
            env_specific_file = f".env.{self.env}"
            if Path(env_specific_file).exists():
                env_file = env_specific_file
                print(f"Loading environment from {env_file}")
            else:
                print(f"Warning: {env_specific_file} not found, falling back to .env")

        load_dotenv(env_file)

    def _load_categories(self):
        """Load and parse the category catalog from YAML file."""
        if not self.categories_file.exists():
            return {}

        with open(self.categories_file, 'r') as file:
            categories_config = yaml.safe_load(file) or {}
            return {
                group['name']: group.get('subgroups', [])
                for group in categories_config.get('categories', [])
                if group.get('enabled', True)
            }

    @property
    def category_options(self):
        """Flatten the catalog into "Group / Subgroup" strings."""
        return [
            f"{group} / {subgroup}"
            for group, subgroups in self.categories.items()
            for subgroup in subgroups
        ]

# Create a global config instance
config = Config()
