"""Example usage of docveil hidden-field serialization."""

import json
from docveil import Document, Schema, Target, create_plugin

# Library-wide defaults: always hide _id, __v and any "token" field
hidden = create_plugin({
    "defaultHidden": {"_id": True, "__v": True, "token": True},
})

address = Schema({
    "street": str,
    "city": str,
    "geo": {"type": dict, "hideJSON": True},
}, _id=False)

user = Schema({
    "name": str,
    "email": {
        "prefix": str,
        "suffix": {"type": str, "hideObject": True},
    },
    "password": {"type": str, "hide": True},
    "salary": {
        "type": int,
        # Only visible for people who asked for it
        "hide": lambda doc, ret: not doc.get("public_salary"),
    },
    "public_salary": {"type": bool, "hide": True},
    "addresses": [address],
})

user.virtual("fullEmail", lambda doc: f"{doc.get('email.prefix')}@{doc.get('email.suffix')}")
user.set_serialization(Target.JSON, virtuals=True)

# Existing transform, kept by the plugin
def shout_name(doc, ret, options):
    ret["name"] = ret["name"].upper()
    return ret

user.set_serialization(Target.OBJECT, transform=shout_name)

user.plugin(hidden, {
    "hidden": {"token": True},
    "virtuals": {"id": "hide"},
    "applyRecursively": True,
})

joe = Document(user, {
    "name": "Joe",
    "email": {"prefix": "joe", "suffix": "example.com"},
    "password": "secret",
    "salary": 1000,
    "public_salary": False,
    "token": "abc123",
    "addresses": [
        {"street": "Main St 1", "city": "Springfield", "geo": {"lat": 1.0, "lng": 2.0}},
    ],
    "__v": 3,
})

if __name__ == "__main__":
    print("JSON:")
    print(json.dumps(joe.to_json(), indent=2))

    print("\nObject:")
    print(json.dumps(joe.to_object(), indent=2))

    joe.set("public_salary", True)
    print("\nJSON after opting in to a public salary:")
    print(json.dumps(joe.to_json(), indent=2))
