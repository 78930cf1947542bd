"""
Quick demo script that starts a local API server.

Shows the available endpoints and how to call them.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting AI Media Recommender Backend Demo")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - Sign-in sync:  POST http://localhost:8000/auth/sign-in")
    print("   - Generate:      POST http://localhost:8000/recommendations/generate")
    print("   - History:       GET  http://localhost:8000/recommendations/history")
    print("   - API Docs:           http://localhost:8000/docs")
    print()
    print("Authentication:")
    print("   All endpoints (except /health) require:")
    print("   Authorization: Bearer <supabase-access-token>")
    print()
    print("Test with curl:")
    print('   curl -X POST "http://localhost:8000/recommendations/generate" \\')
    print('     -H "Authorization: Bearer $TOKEN" -H "Content-Type: application/json" \\')
    print('     -d \'{"favoriteMedia": ["The Matrix"], "mediaTypes": ["movies"]}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "media_recommender.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
