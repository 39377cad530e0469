# -*- coding: utf-8 -*-
from vidshare.crud.comment_crud import comment_crud
from vidshare.crud.user_crud import user_crud
from vidshare.crud.video_crud import video_crud

__all__ = ["comment_crud", "user_crud", "video_crud"]
