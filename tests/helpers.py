"""
Test data builders.
"""


def vendor_record(contact_id="c1", first="Jane", last="Doe", email=None, phone=None, revision=1):
    """Build a vendor contact record the way the CRM returns it."""
    info = {"name": {"first": first, "last": last}}
    if email:
        info["emails"] = {"items": [{"email": email, "primary": True}]}
    if phone:
        info["phones"] = {"items": [{"phone": phone, "primary": True, "tag": "MOBILE"}]}
    return {"id": contact_id, "revision": revision, "info": info}
