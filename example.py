"""Example usage of the schema_tsgen library."""

from schema_tsgen import ObjectId, Schema, generate_file_string, model

# A sub-document schema, embedded as an array in User
friend_schema = Schema(
    {
        "uid": {"type": ObjectId, "ref": "User", "required": True},
        "nickname": str,
    }
)

user_schema = Schema(
    {
        "email": {"type": str, "required": True},
        "firstName": str,
        "lastName": str,
        "role": {"type": str, "enum": ["admin", "user"], "required": True},
        "friends": [friend_schema],
        "address": {"city": str, "zip": str},
    },
    timestamps=True,
)

user_schema.virtual("name").get(lambda doc: f"{doc.firstName} {doc.lastName}")


@user_schema.method
def isFriend(doc, uid):
    return any(friend.uid == uid for friend in doc.friends)


@user_schema.static
def getFriends(cls, friend_uids):
    return cls.find({"_id": {"$in": friend_uids}})


User = model("User", user_schema)

post_schema = Schema(
    {
        "title": {"type": str, "required": True},
        "author": {"type": ObjectId, "ref": "User"},
        "tags": [str],
    }
)
Post = model("Post", post_schema)

# Signatures inferred elsewhere (e.g. by a type checker) can refine the output
function_types = {
    "User": {
        "methods": {"isFriend": "(this: D, uid: User[\"_id\"]) => boolean"},
        "virtuals": {"name": "string"},
    },
}

print(
    generate_file_string(
        {"User": User.schema, "Post": Post.schema},
        is_augmented=False,
        function_types=function_types,
    ),
    end="",
)
