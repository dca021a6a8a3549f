# Routes package init
"""
Todo Labels Backend — API Routes Package
=========================================

Route Inventory:
    - todos.py:   GET/POST /todos, GET/PUT/PATCH/DELETE /todos/{id}
    - labels.py:  GET/POST /labels, DELETE /labels/{id}
    - health.py:  GET /health

Routes stay thin: parse the request, call a service, pick the status code.
"""
