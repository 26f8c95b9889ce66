from asgiref.sync import async_to_sync
from django.http import JsonResponse
from pymongo.errors import PyMongoError

from apps.orders import mongo


def health_view(_request):
    try:
        db_ok = async_to_sync(mongo.ping)()
    except PyMongoError:
        db_ok = False

    ok = db_ok
    code = 200 if ok else 503
    return JsonResponse(
        {"ok": ok, "components": {"mongo": {"ok": db_ok}}},
        status=code,
    )
