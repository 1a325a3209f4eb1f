# app.py
"""
Social API entry point.

 - Configure via environment variables (see socialapi/config.py) or a .env file.
 - Serve with a WSGI server, e.g.
     gunicorn -w 4 -b 0.0.0.0:4000 app:app
 - Uploaded images are served from /uploads for small deployments; put a
   reverse proxy in front of the upload folder for real traffic.
 - Admin accounts: flask --app app create-admin --name ... --email ...
"""

import os

from socialapi import create_app

app = create_app()

if __name__ == "__main__":
    # dev server
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 4000)), debug=os.environ.get("FLASK_DEBUG", "0") == "1")
