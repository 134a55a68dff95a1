import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FileRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('original_name', models.CharField(help_text='Filename as uploaded, without directory parts', max_length=255)),
                ('content_type', models.CharField(blank=True, default='', help_text='MIME type declared by the client (advisory)', max_length=255)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('storage_key', models.CharField(help_text='Key generated by the blob backend', max_length=255)),
                ('backend', models.CharField(choices=[('local', 'Local filesystem'), ('s3', 'Object store')], help_text='Blob backend holding the content', max_length=16)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='file_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File record',
                'verbose_name_plural': 'File records',
                'ordering': ['-uploaded_at', '-id'],
                'indexes': [models.Index(fields=['user', '-uploaded_at'], name='files_user_recent_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('backend', 'storage_key'), name='files_backend_key_unique'),
                    models.CheckConstraint(condition=models.Q(('size_bytes__gte', 0)), name='files_size_bytes_non_negative'),
                ],
            },
        ),
    ]
