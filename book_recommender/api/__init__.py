"""FastAPI routes and endpoints.

Endpoints:
- GET /health: Service health status
- GET /ready: Readiness probe (startup completed)
- POST /v1/recommendations: Content-based recommendations for a supplied corpus

Patterns applied:
- Statelessness principle for horizontal scaling: the corpus travels with the request
"""
