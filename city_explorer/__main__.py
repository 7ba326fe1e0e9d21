"""
Run the API with uvicorn: ``python -m city_explorer``.
"""
import os

import uvicorn


def main():
    uvicorn.run(
        "city_explorer.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )


if __name__ == "__main__":
    main()
