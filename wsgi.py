import sys
import os

# Add your project directory to the sys.path
project_home = os.environ.get('MACRO_PLANNER_HOME', os.path.dirname(os.path.abspath(__file__)))
if project_home not in sys.path:
    sys.path.insert(0, project_home)

# Set the working directory
os.chdir(project_home)

# Import your Flask app
from app import app as application, init_db

init_db()
