import sys
import os

# Add the root directory to the path so that 'techradar' can be imported
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from techradar.main import app

# Vercel looks up the ASGI app under this name
handler = app
