import sys
import os
import traceback

# Add project root to path
sys.path.append(os.getcwd())

print("Starting schema verification...")

try:
    from app import schemas
    print("Schemas package imported successfully.")

    # Try instantiating a few to check for runtime errors in definitions
    from pydantic import ValidationError

    try:
        user = schemas.UserCreate.model_validate({
            "email": "test@example.com",
            "password": "password123",
            "firstName": "Test",
            "lastName": "User",
            "birthDate": "1990-01-01",
        })
        print(f"UserCreate schema valid: {user}")
    except ValidationError as e:
        print(f"UserCreate validation failed: {e}")

    try:
        booking = schemas.BookingCreate.model_validate({
            "slotId": 1,
            "sizeId": 1,
            "placementId": 1,
            "referenceURL": "https://example.com/ref.png",
        })
        print(f"BookingCreate schema valid: {booking.model_dump(by_alias=True)}")
    except ValidationError as e:
        print(f"BookingCreate validation failed: {e}")

    try:
        schemas.BookingStatusUpdate.model_validate({"action": "maybe"})
        print("FAILURE: BookingStatusUpdate accepted an unknown action.")
        sys.exit(1)
    except ValidationError:
        print("BookingStatusUpdate rejects unknown actions.")

    print("SUCCESS: Schemas verified.")

except Exception:
    print("FAILURE: Schema verification failed.")
    traceback.print_exc()
    sys.exit(1)
