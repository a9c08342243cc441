# Import moved models
from domain.models.song import Group, Song, SongDetails
