# Pinboard viewer: read-only browsing of published boards
#
# Components:
#   schema.py   - Data model (Board, Category, Card)
#   route.py    - Fragment routing (#/, #/b/<slug>)
#   service.py  - Datastore query contract + Supabase REST client
#   loader.py   - Route loads with generation-token stale suppression
#   view.py     - ViewState and derived card/board filters
#   backdrop.py - Scoped ambient background
#   viewer.py   - Location + viewer session wiring
#   render.py   - Plain-text presentation
#   config.py   - YAML/env configuration
#   cli.py      - Terminal entry point
